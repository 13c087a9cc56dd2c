#////////////////////////////////////////////////////////////////////////////////#
# File:         __init__.py                                                      #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-02                                                       #
# Description:  Package initialization for product sales forecasting.            #
#////////////////////////////////////////////////////////////////////////////////#
"""
Product sales forecasting package.

Trains a small feed-forward network on one product's sales history from an
uploaded CSV and charts a six month forecast against the actual sales.
"""
