#////////////////////////////////////////////////////////////////////////////////#
# File:         cli.py                                                           #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-11                                                       #
# Description:  Command line forecast runner.                                    #
#////////////////////////////////////////////////////////////////////////////////#
"""
Command line runner: one predict action on a sales CSV.

Loads the file, trains the regressor on the selected product and writes the
actual vs. predicted chart (HTML) and the forecast (JSON) to an output directory.

    python -m sales_forecast.cli --csv-file sales.csv --product "Blue Mug"
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from sales_forecast import config
from sales_forecast.exceptions import SalesForecastError
from sales_forecast.pipeline import ForecastSession
from sales_forecast.utils import create_directory, save_json, setup_torch_device

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list, sys.argv[1:] when None

    Returns:
        argparse.Namespace object containing all parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="Train a sales regressor on one product and forecast the next months",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Data arguments
    parser.add_argument(
        "--csv-file",
        type=str,
        required=True,
        help="Path to the sales CSV (columns id, short_desc, created, total_sold)"
    )
    parser.add_argument(
        "--product",
        type=str,
        default=None,
        help="Product (short_desc) to train on; all records when omitted"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=str(config.OUTPUT_DIR),
        help="Output directory for the chart and forecast"
    )

    # Training hyperparameters
    parser.add_argument("--epochs", type=int, default=config.DEFAULT_EPOCHS, help="Training epochs")
    parser.add_argument("--learning-rate", type=float, default=config.DEFAULT_LEARNING_RATE, help="Learning rate")
    parser.add_argument("--batch-size", type=int, default=config.DEFAULT_BATCH_SIZE, help="Training batch size")
    parser.add_argument("--random-seed", type=int, default=config.RANDOM_SEED, help="Random seed")

    # Other options
    parser.add_argument("--list-products", action="store_true", help="Print the products in the file and exit")
    parser.add_argument("--gpu", action="store_true", help="Train on GPU when available")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one forecast from the command line.

    Returns:
        Process exit status (0 on success)
    """
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT
    )

    session = ForecastSession(
        epochs=args.epochs,
        learning_rate=args.learning_rate,
        batch_size=args.batch_size,
        random_seed=args.random_seed,
        device=str(setup_torch_device(prefer_gpu=args.gpu)),
    )

    if not session.load_file(args.csv_file):
        return 1

    if args.list_products:
        for product in session.products:
            print(product)
        return 0

    if args.product and args.product not in session.products:
        logger.warning(f"Product {args.product!r} not found in {args.csv_file}")
    session.select_product(args.product)

    try:
        outcome = asyncio.run(session.predict())
    except SalesForecastError as e:
        logger.error(f"Prediction failed: {e}")
        return 1

    output_dir = Path(args.output_dir)
    create_directory(output_dir)

    chart_path = session.surface.write_html(output_dir / config.OUTPUT_CONFIG["chart_file_name"])
    forecast_path = output_dir / config.OUTPUT_CONFIG["forecast_file_name"]
    save_json({
        "product": outcome.product,
        "training_samples": len(outcome.encoded),
        "product_mapping": outcome.encoded.product_mapping,
        "normalization": {"min": outcome.trained.params.min, "max": outcome.trained.params.max},
        "final_loss": outcome.trained.final_loss,
        **outcome.forecast.to_dict(),
    }, forecast_path)

    logger.info("=" * 60)
    logger.info("FORECAST COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Forecast: {outcome.forecast.quantities}")
    logger.info(f"Chart saved to: {chart_path}")
    logger.info(f"Forecast saved to: {forecast_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
