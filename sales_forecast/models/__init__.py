#////////////////////////////////////////////////////////////////////////////////#
# File:         __init__.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-05                                                       #
# Description:  Models package initialization.                                   #
#////////////////////////////////////////////////////////////////////////////////#
"""
Models package for product sales forecasting.

Exports the feed-forward regressor and its training helpers.
"""

from .regressor import (
    SalesRegressor,
    create_regressor,
    train_regressor,
    predict_with_regressor
)

__all__ = [
    'SalesRegressor',
    'create_regressor',
    'train_regressor',
    'predict_with_regressor'
]
