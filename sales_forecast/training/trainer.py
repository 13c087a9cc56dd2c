#////////////////////////////////////////////////////////////////////////////////#
# File:         trainer.py                                                       #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-08                                                       #
# Description:  Lag-1 training of the sales regressor.                           #
#////////////////////////////////////////////////////////////////////////////////#
"""
Training of the sales regressor on encoded samples.

Supervised pairs are built lag-1 style: the (month, product code) of each
sample is used to predict the normalized quantity of the next sample. The
forecaster relies on the same convention, so both have to change together.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

import torch

from sales_forecast import config
from sales_forecast.exceptions import InsufficientDataError
from sales_forecast.feature_engineering import EncodedDataset, NormalizationParams
from sales_forecast.models.regressor import (
    EpochCallback,
    SalesRegressor,
    create_regressor,
    train_regressor,
)
from sales_forecast.utils import format_time, set_random_seed

logger = logging.getLogger(__name__)


@dataclass
class TrainedModel:
    """A fitted regressor plus what is needed to turn its outputs into quantities."""
    model: SalesRegressor
    params: NormalizationParams
    history: Dict[str, List[float]] = field(default_factory=dict)

    @property
    def final_loss(self) -> Optional[float]:
        losses = self.history.get("loss", [])
        return losses[-1] if losses else None


def build_training_pairs(encoded: EncodedDataset) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Lag-1 training pairs from the encoded samples.

    Args:
        encoded: Encoded dataset with N samples

    Returns:
        xs: Tensor of shape (N-1, 2), (month, product code) of samples 0..N-2
        ys: Tensor of shape (N-1,), normalized quantity of samples 1..N-1

    Raises:
        InsufficientDataError: If fewer than two samples are available
    """
    samples = encoded.samples
    if len(samples) < config.MIN_TRAINING_SAMPLES:
        raise InsufficientDataError(
            f"Need at least {config.MIN_TRAINING_SAMPLES} usable samples to train, got {len(samples)}"
        )

    features = samples[config.FEATURE_COLUMNS].to_numpy(dtype="float32")
    quantities = samples[config.TARGET_COLUMN].to_numpy(dtype="float32")

    xs = torch.tensor(features[:-1], dtype=torch.float32)
    ys = torch.tensor(quantities[1:], dtype=torch.float32)

    logger.debug(f"Quantities: {quantities.tolist()}")
    return xs, ys


def fit_sales_model(
    encoded: EncodedDataset,
    epochs: int = config.DEFAULT_EPOCHS,
    learning_rate: float = config.DEFAULT_LEARNING_RATE,
    batch_size: int = config.DEFAULT_BATCH_SIZE,
    random_seed: Optional[int] = None,
    device: Union[str, torch.device] = "cpu",
    epoch_callback: Optional[EpochCallback] = None
) -> TrainedModel:
    """
    Build a fresh regressor and fit it on the lag-1 pairs of the encoded samples.

    Args:
        encoded: Output of preprocess_sales_records
        epochs: Number of training epochs
        learning_rate: Adam learning rate
        batch_size: Mini-batch size
        random_seed: Seed for weight init and shuffling, None keeps torch's state
        device: Device to train on
        epoch_callback: Optional per-epoch (epoch, loss) hook

    Returns:
        TrainedModel with the fitted network and normalization params
    """
    xs, ys = build_training_pairs(encoded)

    if random_seed is not None:
        set_random_seed(random_seed)

    model = create_regressor()
    logger.info(f"Training regressor on {xs.shape[0]} pairs for {epochs} epochs (lr={learning_rate})")

    start_time = time.time()
    history = train_regressor(
        model,
        xs,
        ys,
        epochs=epochs,
        batch_size=batch_size,
        learning_rate=learning_rate,
        device=device,
        epoch_callback=epoch_callback,
    )
    logger.info(f"Training finished in {format_time(time.time() - start_time)}")

    return TrainedModel(model=model, params=encoded.params, history=history)


async def train_sales_model(
    encoded: EncodedDataset,
    epochs: int = config.DEFAULT_EPOCHS,
    learning_rate: float = config.DEFAULT_LEARNING_RATE,
    batch_size: int = config.DEFAULT_BATCH_SIZE,
    random_seed: Optional[int] = None,
    device: Union[str, torch.device] = "cpu",
    epoch_callback: Optional[EpochCallback] = None
) -> TrainedModel:
    """Async variant of fit_sales_model; the fit runs in a worker thread."""
    # validate before handing off so dataset errors surface without a thread hop
    build_training_pairs(encoded)
    return await asyncio.to_thread(
        fit_sales_model,
        encoded,
        epochs=epochs,
        learning_rate=learning_rate,
        batch_size=batch_size,
        random_seed=random_seed,
        device=device,
        epoch_callback=epoch_callback,
    )
