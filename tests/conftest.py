import io

import pandas as pd
import pytest

from sales_forecast.data_loader import load_sales_csv

SALES_CSV = """id,short_desc,created,total_sold,store
1,Blue Mug,01/01,10,north
2,Red Plate,01/01,4,north
3,Blue Mug,01/02,12,south

4,Blue Mug,01/03,15,north
5,Red Plate,01/02,6,south
6,Green Bowl,01/01,7,north
7,Blue Mug,01/04,11,south
"""


def make_records(rows):
    """records table from a list of dicts, all values as strings"""
    return pd.DataFrame(rows).astype(str)


@pytest.fixture
def sales_csv_path(tmp_path):
    path = tmp_path / "sales.csv"
    path.write_text(SALES_CSV)
    return path


@pytest.fixture
def sales_records():
    return load_sales_csv(io.StringIO(SALES_CSV))


@pytest.fixture
def scenario_records():
    return make_records([
        {"id": "1", "short_desc": "A", "created": "01/05", "total_sold": "10"},
        {"id": "2", "short_desc": "A", "created": "01/06", "total_sold": "20"},
        {"id": "3", "short_desc": "A", "created": "01/07", "total_sold": "30"},
    ])
