#////////////////////////////////////////////////////////////////////////////////#
# File:         exceptions.py                                                    #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-02                                                       #
# Description:  Pipeline exceptions.                                             #
#////////////////////////////////////////////////////////////////////////////////#
"""Exceptions raised by the sales forecasting pipeline."""


class SalesForecastError(Exception):
    """Base class for all pipeline errors."""
    pass


class CsvParseError(SalesForecastError):
    """Raised when an uploaded sales file cannot be parsed as CSV."""
    pass


class InvalidRowError(SalesForecastError):
    """Raised when a single record has an unusable date or quantity."""
    pass


class EmptyDatasetError(SalesForecastError):
    """Raised when the filtered record set has nothing to normalize or train on."""
    pass


class InsufficientDataError(SalesForecastError):
    """Raised when fewer than two encoded samples are available for training."""
    pass
