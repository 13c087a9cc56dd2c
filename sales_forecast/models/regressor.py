#////////////////////////////////////////////////////////////////////////////////#
# File:         regressor.py                                                     #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-05                                                       #
#////////////////////////////////////////////////////////////////////////////////#
"""
Feed-forward regression network mapping (month, product code) to a normalized quantity.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np
import torch
import torch.nn as nn
import torch.optim as optim

from sales_forecast import config

logger = logging.getLogger(__name__)

EpochCallback = Callable[[int, float], None]


class SalesRegressor(nn.Module):
    """
    Fully connected regressor: ReLU hidden layers and a linear output.
    """
    def __init__(
        self,
        input_dim: int = config.INPUT_DIM,
        hidden_sizes: Sequence[int] = config.HIDDEN_LAYER_SIZES,
        output_dim: int = config.OUTPUT_DIM
    ):
        """
        Initialize the regressor.

        Args:
            input_dim: Number of input features (month, product code)
            hidden_sizes: Units of each hidden layer, in order
            output_dim: Number of outputs (one normalized quantity)
        """
        super(SalesRegressor, self).__init__()

        self.input_dim = input_dim
        self.hidden_sizes = tuple(hidden_sizes)
        self.output_dim = output_dim

        layers: List[nn.Module] = []
        in_features = input_dim
        for units in self.hidden_sizes:
            layers.append(nn.Linear(in_features, units))
            layers.append(nn.ReLU())
            in_features = units
        # identity activation on the output layer
        layers.append(nn.Linear(in_features, output_dim))

        self.network = nn.Sequential(*layers)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Args:
            x: Tensor of shape (batch_size, input_dim)

        Returns:
            Tensor of shape (batch_size, output_dim)
        """
        return self.network(x)


def create_regressor(
    input_dim: int = config.INPUT_DIM,
    hidden_sizes: Sequence[int] = config.HIDDEN_LAYER_SIZES,
    output_dim: int = config.OUTPUT_DIM
) -> SalesRegressor:
    """Factory for a freshly initialized regressor."""
    return SalesRegressor(input_dim=input_dim, hidden_sizes=hidden_sizes, output_dim=output_dim)


def train_regressor(
    model: SalesRegressor,
    features: torch.Tensor,
    targets: torch.Tensor,
    epochs: int = config.DEFAULT_EPOCHS,
    batch_size: int = config.DEFAULT_BATCH_SIZE,
    learning_rate: float = config.DEFAULT_LEARNING_RATE,
    shuffle: bool = True,
    device: Union[str, torch.device] = "cpu",
    epoch_callback: Optional[EpochCallback] = None
) -> Dict[str, List[float]]:
    """
    Fit the regressor with Adam on mean squared error for a fixed number of epochs.

    There is no early stopping and no validation split; every epoch is a full
    pass over the training set in mini-batches.

    Args:
        model: Regressor to train in place
        features: Tensor of shape (n_samples, input_dim)
        targets: Tensor of shape (n_samples,) or (n_samples, 1)
        epochs: Number of passes over the data
        batch_size: Mini-batch size
        learning_rate: Adam learning rate
        shuffle: Reshuffle the samples every epoch
        device: Device to train on
        epoch_callback: Optional callable receiving (epoch, loss) after each epoch

    Returns:
        Dictionary with training history (loss per epoch)
    """
    model = model.to(device)
    features = features.to(device, dtype=torch.float32)
    targets = targets.to(device, dtype=torch.float32).reshape(-1, 1)

    optimizer = optim.Adam(model.parameters(), lr=learning_rate)
    criterion = nn.MSELoss()

    history: Dict[str, List[float]] = {"loss": []}

    n_samples = features.shape[0]
    n_batches = (n_samples + batch_size - 1) // batch_size

    for epoch in range(epochs):
        model.train()
        total_loss = 0.0

        if shuffle:
            order = torch.randperm(n_samples, device=features.device)
        else:
            order = torch.arange(n_samples, device=features.device)

        for batch_idx in range(n_batches):
            start_idx = batch_idx * batch_size
            end_idx = min(start_idx + batch_size, n_samples)
            batch_indices = order[start_idx:end_idx]

            optimizer.zero_grad()
            y_pred = model(features[batch_indices])
            loss = criterion(y_pred, targets[batch_indices])
            loss.backward()
            optimizer.step()

            # weight by batch size so the epoch loss is the mean over samples
            total_loss += loss.item() * len(batch_indices)

        epoch_loss = total_loss / n_samples
        history["loss"].append(epoch_loss)

        logger.info(f"Epoch {epoch + 1}/{epochs}, Loss: {epoch_loss:.6f}")
        if epoch_callback is not None:
            epoch_callback(epoch + 1, epoch_loss)

    return history


def predict_with_regressor(
    model: SalesRegressor,
    inputs: Union[torch.Tensor, np.ndarray],
    device: Union[str, torch.device] = "cpu"
) -> np.ndarray:
    """
    Run the regressor without gradients.

    Returns:
        Flat array with one prediction per input row
    """
    model = model.to(device)
    model.eval()

    inputs = torch.as_tensor(inputs, dtype=torch.float32).to(device)
    if inputs.dim() == 1:
        inputs = inputs.unsqueeze(0)

    with torch.no_grad():
        outputs = model(inputs)

    return outputs.cpu().numpy().reshape(-1)
