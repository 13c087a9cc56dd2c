#////////////////////////////////////////////////////////////////////////////////#
# File:         utils.py                                                         #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-03                                                       #
#////////////////////////////////////////////////////////////////////////////////#
"""
Utility functions for the sales forecasting tool.
"""
import json
import logging
import random
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import torch

from sales_forecast import config

logger = logging.getLogger(__name__)


def create_directory(directory: Union[str, Path]) -> None:
    """create directory if it doesnt exist"""
    Path(directory).mkdir(parents=True, exist_ok=True)


def save_json(data: Dict, filepath: Union[str, Path]) -> None:
    """Save dict to JSON."""
    with open(filepath, 'w') as f:
        json.dump(data, f, indent=4)


def setup_torch_device(prefer_gpu: bool = False) -> torch.device:
    """setup torch device, cpu unless a gpu is asked for and present"""
    if prefer_gpu and torch.cuda.is_available():
        device = torch.device("cuda")
        logger.info(f"Using GPU: {torch.cuda.get_device_name(0)}")
    else:
        device = torch.device("cpu")
        logger.info("Using CPU")
    return device


def set_random_seed(seed: Optional[int] = None) -> None:
    """set random seed for reproducability"""
    if seed is None:
        seed = config.RANDOM_SEED

    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)


def format_time(seconds: float) -> str:
    """format seconds into readable string"""
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{int(hours)}h {int(minutes)}m {int(seconds)}s"
