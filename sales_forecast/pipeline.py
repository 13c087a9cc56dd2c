#////////////////////////////////////////////////////////////////////////////////#
# File:         pipeline.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-10                                                       #
# Description:  Upload / select / predict session.                               #
#////////////////////////////////////////////////////////////////////////////////#
"""
One user session of the forecasting tool: upload, product selection and predict.

Loading a file refreshes the records and the product list. Predicting runs
filter -> encode -> train -> forecast -> render as one async task whose only
suspension point is model fitting. Cycles are serialized by a lock so hosts
that run callbacks on several threads never interleave two predictions.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from sales_forecast import config
from sales_forecast.data_loader import CsvSource, filter_by_product, get_unique_products, load_sales_csv
from sales_forecast.exceptions import CsvParseError, InvalidRowError
from sales_forecast.feature_engineering import EncodedDataset, parse_quantity, preprocess_sales_records
from sales_forecast.forecasting import ForecastResult, forecast_from_samples
from sales_forecast.training.trainer import TrainedModel, train_sales_model
from sales_forecast.visualization import ChartHandle, ChartSurface

logger = logging.getLogger(__name__)


@dataclass
class PredictionOutcome:
    """Everything one predict action produced."""
    product: Optional[str]
    encoded: EncodedDataset
    trained: TrainedModel
    forecast: ForecastResult
    actual: List[float]
    chart: ChartHandle


def actual_quantities(records: pd.DataFrame) -> List[float]:
    """numeric total_sold of the records in order, NaN where it does not parse"""
    if config.QUANTITY_COLUMN not in records.columns:
        return [np.nan] * len(records)
    values = []
    for value in records[config.QUANTITY_COLUMN]:
        try:
            values.append(parse_quantity(value))
        except InvalidRowError:
            values.append(np.nan)
    return values


class ForecastSession:
    """
    State behind the upload / select / predict controls.

    Args:
        surface: Drawing surface for the chart (a fresh one if omitted)
        epochs: Training epochs per prediction
        learning_rate: Adam learning rate
        batch_size: Mini-batch size
        random_seed: Seed for every training run, None for unseeded runs
        device: Torch device for training
    """

    def __init__(
        self,
        surface: Optional[ChartSurface] = None,
        epochs: int = config.DEFAULT_EPOCHS,
        learning_rate: float = config.DEFAULT_LEARNING_RATE,
        batch_size: int = config.DEFAULT_BATCH_SIZE,
        random_seed: Optional[int] = None,
        device: str = "cpu"
    ):
        self.surface = surface if surface is not None else ChartSurface()
        self.epochs = epochs
        self.learning_rate = learning_rate
        self.batch_size = batch_size
        self.random_seed = random_seed
        self.device = device

        self.records = pd.DataFrame()
        self.products: List[str] = []
        self.selected_product: Optional[str] = None
        self.last_outcome: Optional[PredictionOutcome] = None

        self._predict_lock = threading.Lock()

    def load_file(self, source: CsvSource) -> bool:
        """
        Load a sales CSV and rebuild the product list.

        A file that fails to parse is logged and leaves the previously loaded
        records and products in place.

        Returns:
            True if the file was loaded
        """
        try:
            records = load_sales_csv(source)
        except CsvParseError as e:
            logger.error(f"Upload aborted, keeping previously loaded data: {e}")
            return False

        self.records = records
        self.products = get_unique_products(records)
        logger.info(f"{len(self.products)} products available")
        return True

    def select_product(self, product: Optional[str]) -> None:
        self.selected_product = product or None

    async def predict(self) -> PredictionOutcome:
        """
        Train on the selected product's history and chart a forecast.

        Raises:
            EmptyDatasetError: If the selection has no records or quantities
            InsufficientDataError: If fewer than two samples survive encoding

        Both are raised before any training, and leave the chart and the last
        outcome untouched.
        """
        # wait for the lock off the event loop so a queued cycle cannot stall a running one
        await asyncio.to_thread(self._predict_lock.acquire)
        try:
            product = self.selected_product
            filtered = filter_by_product(self.records, product)
            logger.info(f"Filtered data: {len(filtered)} of {len(self.records)} records")

            encoded = preprocess_sales_records(filtered)

            trained = await train_sales_model(
                encoded,
                epochs=self.epochs,
                learning_rate=self.learning_rate,
                batch_size=self.batch_size,
                random_seed=self.random_seed,
                device=self.device,
            )

            forecast = forecast_from_samples(trained, encoded)
            actual = actual_quantities(filtered)
            chart = self.surface.render(actual, forecast.quantities)

            self.last_outcome = PredictionOutcome(
                product=product,
                encoded=encoded,
                trained=trained,
                forecast=forecast,
                actual=actual,
                chart=chart,
            )
            return self.last_outcome
        finally:
            self._predict_lock.release()
