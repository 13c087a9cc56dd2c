import io
import logging

import pytest

from sales_forecast.data_loader import filter_by_product, get_unique_products, load_sales_csv
from sales_forecast.exceptions import CsvParseError

from conftest import make_records


def test_load_keeps_file_order_and_skips_blank_lines(sales_csv_path):
    records = load_sales_csv(sales_csv_path)

    assert len(records) == 7
    assert records["id"].tolist() == ["1", "2", "3", "4", "5", "6", "7"]
    # extra columns come along untouched
    assert "store" in records.columns


def test_load_keeps_values_as_strings():
    records = load_sales_csv(io.StringIO("id,short_desc,created,total_sold\n1,A,01/05,007\n2,,01/06,\n"))

    assert records.loc[0, "total_sold"] == "007"
    assert records.loc[1, "short_desc"] == ""
    assert records.loc[1, "total_sold"] == ""


def test_load_accepts_binary_uploads():
    upload = io.BytesIO(b"id,short_desc,created,total_sold\n1,A,01/05,10\n")
    records = load_sales_csv(upload)
    assert records["short_desc"].tolist() == ["A"]


def test_malformed_csv_raises_and_logs(caplog):
    bad = io.StringIO("id,short_desc,created,total_sold\n1,A,01/05,10\n2,B,01/06,4,extra,cols\n")

    with caplog.at_level(logging.ERROR, logger="sales_forecast.data_loader"):
        with pytest.raises(CsvParseError):
            load_sales_csv(bad)

    assert "Error parsing CSV" in caplog.text


def test_empty_and_missing_files_raise(tmp_path):
    empty = tmp_path / "empty.csv"
    empty.write_text("")

    with pytest.raises(CsvParseError):
        load_sales_csv(empty)
    with pytest.raises(CsvParseError):
        load_sales_csv(tmp_path / "missing.csv")


def test_unique_products_sorted_and_without_blanks():
    records = make_records([
        {"short_desc": "Red Plate"},
        {"short_desc": "Blue Mug"},
        {"short_desc": ""},
        {"short_desc": "Red Plate"},
    ])

    assert get_unique_products(records) == ["Blue Mug", "Red Plate"]


def test_unique_products_idempotent_and_order_independent(sales_records):
    products = get_unique_products(sales_records)
    shuffled = sales_records.sample(frac=1.0, random_state=3)

    assert products == ["Blue Mug", "Green Bowl", "Red Plate"]
    assert get_unique_products(shuffled) == products
    assert get_unique_products(sales_records) == products


def test_unique_products_without_label_column():
    assert get_unique_products(make_records([{"id": "1"}])) == []


def test_filter_by_product_keeps_order(sales_records):
    filtered = filter_by_product(sales_records, "Blue Mug")

    assert filtered["id"].tolist() == ["1", "3", "4", "7"]
    assert set(filtered["short_desc"]) == {"Blue Mug"}


@pytest.mark.parametrize("selection", [None, ""])
def test_no_selection_passes_everything(sales_records, selection):
    assert len(filter_by_product(sales_records, selection)) == len(sales_records)


def test_unknown_product_filters_to_nothing(sales_records):
    assert filter_by_product(sales_records, "Teapot").empty
