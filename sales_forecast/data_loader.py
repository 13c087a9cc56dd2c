#////////////////////////////////////////////////////////////////////////////////#
# File:         data_loader.py                                                   #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-03                                                       #
# Description:  Sales CSV loading, product index and filtering.                  #
#////////////////////////////////////////////////////////////////////////////////#
"""
Loading, indexing and filtering of uploaded product sales CSV files.
"""
import logging
from pathlib import Path
from typing import IO, List, Optional, Union

import pandas as pd

from sales_forecast import config
from sales_forecast.exceptions import CsvParseError

logger = logging.getLogger(__name__)

CsvSource = Union[str, Path, IO]


def load_sales_csv(source: CsvSource) -> pd.DataFrame:
    """
    Parse a sales CSV into a table of string records.

    The header row gives the field names. Every cell is kept as the raw string
    from the file (missing cells become ""), fully blank lines are skipped and
    rows stay in file order. No schema validation happens here; downstream
    stages drop whatever they cannot use.

    Args:
        source: Path to the CSV file or an open file-like object (e.g. an upload)

    Returns:
        DataFrame with one row per record

    Raises:
        CsvParseError: If the file is missing, empty, undecodable or malformed
    """
    name = getattr(source, "name", source)
    try:
        records = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
        logger.error(f"Error parsing CSV {name}: {e}")
        raise CsvParseError(f"Could not parse sales CSV {name}: {e}") from e

    logger.info(f"Loaded {len(records)} records with columns {list(records.columns)} from {name}")
    return records


def get_unique_products(records: pd.DataFrame) -> List[str]:
    """
    Sorted distinct product labels over all records.

    Records without a product label are left out.
    """
    if config.PRODUCT_COLUMN not in records.columns:
        return []

    labels = records[config.PRODUCT_COLUMN].dropna()
    labels = labels[labels != ""]
    return sorted(set(labels))


def filter_by_product(records: pd.DataFrame, product: Optional[str] = None) -> pd.DataFrame:
    """
    Narrow the records to one product, keeping file order.

    No selection (None or "") passes every record through.
    """
    logger.info(f"Selected product: {product!r}")
    if not product:
        return records

    if config.PRODUCT_COLUMN not in records.columns:
        return records.iloc[0:0]

    return records[records[config.PRODUCT_COLUMN] == product]
