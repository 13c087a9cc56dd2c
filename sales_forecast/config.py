#////////////////////////////////////////////////////////////////////////////////#
# File:         config.py                                                        #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-02                                                       #
# Description:  Configuration settings for product sales forecasting.            #
#////////////////////////////////////////////////////////////////////////////////#
"""
Configuration settings for the product sales forecasting tool.
"""
from pathlib import Path

# Output directory of the command line runner, relative to the working directory
OUTPUT_DIR = Path("forecast_output")

# CSV columns consumed from the uploaded sales file (extra columns are ignored)
ID_COLUMN = "id"
PRODUCT_COLUMN = "short_desc"
DATE_COLUMN = "created"
QUANTITY_COLUMN = "total_sold"

# Encoded sample columns
MONTH_FEATURE = "sales_month"
PRODUCT_FEATURE = "product_code"
TARGET_COLUMN = "quantity_sold"
FEATURE_COLUMNS = [MONTH_FEATURE, PRODUCT_FEATURE]

DATE_SEPARATOR = "/"
DATE_SEGMENTS = 2  # month lives in the second segment

# Forecast settings
FORECAST_HORIZON = 6  # months forecast beyond the last observed month
FORECAST_DECIMALS = 2
MIN_TRAINING_SAMPLES = 2  # lag-1 pairs need at least two samples

# Network settings
INPUT_DIM = len(FEATURE_COLUMNS)
HIDDEN_LAYER_SIZES = (64, 32)
OUTPUT_DIM = 1

# Training settings
RANDOM_SEED = 42
DEFAULT_LEARNING_RATE = 0.01
DEFAULT_EPOCHS = 200
DEFAULT_BATCH_SIZE = 32  # framework-default mini-batch of 32, reshuffled every epoch

# Logging
LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Chart settings
CHART_TITLE = "Actual vs. Predicted Sales"
CHART_X_TITLE = "Months"
CHART_Y_TITLE = "Sales Quantity"
ACTUAL_SERIES_NAME = "Actual Sales"
FORECAST_SERIES_NAME = "Predicted Sales"
ACTUAL_COLOR = "blue"
FORECAST_COLOR = "orange"
CHART_WIDTH = 500
CHART_HEIGHT = 400

# Output files written by the command line runner
OUTPUT_CONFIG = {
    "chart_file_name": "forecast_chart.html",
    "forecast_file_name": "forecast.json",
}
