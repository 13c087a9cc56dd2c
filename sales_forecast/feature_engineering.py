#////////////////////////////////////////////////////////////////////////////////#
# File:         feature_engineering.py                                           #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-04                                                       #
# Description:  Month, product code and quantity encoding.                       #
#////////////////////////////////////////////////////////////////////////////////#
"""
Feature encoding for product sales records.

Turns raw string records into numeric samples for the regressor:
month of sale, a dense product code and a min-max normalized quantity.
"""
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from sales_forecast import config
from sales_forecast.exceptions import EmptyDatasetError, InvalidRowError

logger = logging.getLogger(__name__)

# leading-number patterns, trailing junk after the number is ignored
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class NormalizationParams:
    """Quantity range of the encoded record set, needed to invert predictions."""
    min: float
    max: float

    def normalize(self, value: float) -> float:
        if self.max == self.min:
            return 0.0
        return (value - self.min) / (self.max - self.min)

    def denormalize(self, value: float) -> float:
        return value * (self.max - self.min) + self.min


@dataclass
class EncodedDataset:
    """
    Output of one preprocessing pass.

    Attributes:
        samples: DataFrame with sales_month, product_code and quantity_sold columns
        params: Min/max of the quantities used for normalization
        product_mapping: Product label to product code for this pass only
    """
    samples: pd.DataFrame
    params: NormalizationParams
    product_mapping: Dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def last_sample(self) -> Tuple[int, int]:
        """(month, product code) of the last encoded sample"""
        if self.samples.empty:
            raise EmptyDatasetError("No encoded samples available")
        last = self.samples.iloc[-1]
        return int(last[config.MONTH_FEATURE]), int(last[config.PRODUCT_FEATURE])


def extract_sales_month(created: str) -> int:
    """
    Month of sale from a slash-delimited date such as "01/05".

    The date must split into exactly two segments; the month is the integer
    at the start of the second one.

    Raises:
        InvalidRowError: If the date has the wrong shape or no integer month
    """
    parts = str(created).split(config.DATE_SEPARATOR)
    if len(parts) != config.DATE_SEGMENTS:
        raise InvalidRowError(f"Invalid date format {created!r}")

    match = _INT_PREFIX.match(parts[1])
    if match is None:
        raise InvalidRowError(f"Invalid month in date {created!r}")
    return int(match.group(1))


def parse_quantity(value: str) -> float:
    """
    Numeric quantity from the leading number of a string.

    Raises:
        InvalidRowError: If the string does not start with a finite number
    """
    match = _FLOAT_PREFIX.match(str(value))
    if match is None:
        raise InvalidRowError(f"Invalid quantity {value!r}")
    quantity = float(match.group(1))
    # "1e400" overflows to inf
    if not math.isfinite(quantity):
        raise InvalidRowError(f"Invalid quantity {value!r} (not finite)")
    return quantity


def collect_quantities(records: pd.DataFrame) -> List[float]:
    """parseable quantities of all records, in record order"""
    if config.QUANTITY_COLUMN not in records.columns:
        return []

    quantities = []
    for value in records[config.QUANTITY_COLUMN]:
        try:
            quantities.append(parse_quantity(value))
        except InvalidRowError:
            continue
    return quantities


def fit_quantity_scaler(records: pd.DataFrame) -> Tuple[MinMaxScaler, NormalizationParams]:
    """
    Fit a min-max scaler on every parseable quantity in the records.

    Rows with a bad date still count towards the range as long as their
    quantity parses.

    Raises:
        EmptyDatasetError: If no quantity can be parsed
    """
    quantities = collect_quantities(records)
    if not quantities:
        raise EmptyDatasetError(
            f"No parseable {config.QUANTITY_COLUMN} values among {len(records)} records"
        )

    scaler = MinMaxScaler()
    scaler.fit(np.asarray(quantities, dtype=float).reshape(-1, 1))
    params = NormalizationParams(min=float(scaler.data_min_[0]), max=float(scaler.data_max_[0]))
    return scaler, params


def compute_quantity_range(records: pd.DataFrame) -> NormalizationParams:
    """min/max of the parseable quantities"""
    _, params = fit_quantity_scaler(records)
    return params


def encode_products(labels: Iterable[str]) -> Dict[str, int]:
    """Assign 0..k-1 to distinct labels in first-seen order."""
    mapping: Dict[str, int] = {}
    for label in labels:
        if label not in mapping:
            mapping[label] = len(mapping)
    return mapping


def preprocess_sales_records(records: pd.DataFrame) -> EncodedDataset:
    """
    Encode records into (month, product code) features and normalized quantities.

    Rows with an invalid date or quantity are logged and dropped; the rest keep
    their input order. The product mapping is rebuilt on every call. When all
    quantities are equal every normalized quantity is 0.

    Args:
        records: Filtered sales records as loaded by load_sales_csv

    Returns:
        EncodedDataset with samples, normalization params and product mapping

    Raises:
        EmptyDatasetError: If there are no records or no parseable quantities
    """
    if records.empty:
        raise EmptyDatasetError("No sales records to encode (is the selected product in the file?)")

    scaler, params = fit_quantity_scaler(records)

    months = []
    labels = []
    quantities = []
    for record in records.to_dict("records"):
        record_id = record.get(config.ID_COLUMN, "")
        try:
            month = extract_sales_month(record.get(config.DATE_COLUMN, ""))
            quantity = parse_quantity(record.get(config.QUANTITY_COLUMN, ""))
        except InvalidRowError as e:
            logger.warning(f"{e} for item with ID {record_id}, skipping.")
            continue

        months.append(month)
        labels.append(record.get(config.PRODUCT_COLUMN, ""))
        quantities.append(quantity)

    product_mapping = encode_products(labels)

    if quantities:
        normalized = scaler.transform(np.asarray(quantities, dtype=float).reshape(-1, 1)).ravel()
    else:
        normalized = np.empty(0, dtype=float)

    samples = pd.DataFrame({
        config.MONTH_FEATURE: np.asarray(months, dtype=np.int64),
        config.PRODUCT_FEATURE: np.asarray([product_mapping[label] for label in labels], dtype=np.int64),
        config.TARGET_COLUMN: normalized,
    })

    dropped = len(records) - len(samples)
    logger.info(
        f"Encoded {len(samples)} samples ({dropped} dropped), "
        f"{len(product_mapping)} products, quantity range [{params.min}, {params.max}]"
    )
    return EncodedDataset(samples=samples, params=params, product_mapping=product_mapping)
