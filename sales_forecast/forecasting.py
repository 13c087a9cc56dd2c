#////////////////////////////////////////////////////////////////////////////////#
# File:         forecasting.py                                                   #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-08                                                       #
# Description:  Six month rollout of a trained regressor.                        #
#////////////////////////////////////////////////////////////////////////////////#
"""
Multi-step forecasting with a trained sales regressor.
"""
import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from sales_forecast import config
from sales_forecast.feature_engineering import EncodedDataset, NormalizationParams
from sales_forecast.models.regressor import SalesRegressor, predict_with_regressor
from sales_forecast.training.trainer import TrainedModel

logger = logging.getLogger(__name__)


@dataclass
class ForecastResult:
    """Forecast quantities, one per month after the last observed month."""
    months: List[int]
    quantities: List[float]

    def __len__(self) -> int:
        return len(self.quantities)

    def to_dict(self) -> dict:
        return {"months": list(self.months), "quantities": list(self.quantities)}


def forecast_quantities(
    model: SalesRegressor,
    last_month: int,
    last_product_code: int,
    params: NormalizationParams,
    horizon: int = config.FORECAST_HORIZON
) -> ForecastResult:
    """
    Roll the regressor forward month by month.

    Step i feeds (last_month + i, last_product_code); the product code stays
    the same for every step. Outputs are denormalized, clamped at zero and
    rounded for display.

    Args:
        model: Trained regressor
        last_month: Month of the last encoded sample
        last_product_code: Product code of the last encoded sample
        params: Normalization params of the training data
        horizon: Number of months to forecast

    Returns:
        ForecastResult with `horizon` months and quantities
    """
    months = [last_month + step for step in range(1, horizon + 1)]

    quantities = []
    for month in months:
        inputs = np.array([[month, last_product_code]], dtype=np.float32)
        normalized = float(predict_with_regressor(model, inputs)[0])
        quantity = max(0.0, params.denormalize(normalized))
        quantities.append(round(quantity, config.FORECAST_DECIMALS))

    logger.info(f"Prediction: {quantities}")
    return ForecastResult(months=months, quantities=quantities)


def forecast_from_samples(trained: TrainedModel, encoded: EncodedDataset) -> ForecastResult:
    """forecast from the last encoded sample"""
    last_month, last_product_code = encoded.last_sample
    return forecast_quantities(trained.model, last_month, last_product_code, trained.params)
