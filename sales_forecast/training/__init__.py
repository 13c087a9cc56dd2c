#////////////////////////////////////////////////////////////////////////////////#
# File:         __init__.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-05                                                       #
# Description:  Training package initialization.                                 #
#////////////////////////////////////////////////////////////////////////////////#
"""
Training for product sales forecasting models.

- trainer.py: lag-1 pair building and (async) fitting of the sales regressor
"""

from .trainer import (
    TrainedModel,
    build_training_pairs,
    fit_sales_model,
    train_sales_model
)

__all__ = [
    'TrainedModel',
    'build_training_pairs',
    'fit_sales_model',
    'train_sales_model'
]
