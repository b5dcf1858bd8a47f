"""
Logging configuration for the Claymore client and its example scripts.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    name: Optional[str] = None,
    level: int = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        name: Logger name (defaults to root logger if None)
        level: Logging level
        log_dir: Directory for a dated log file; console only if None

    Returns:
        Configured logger
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(console_handler)

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        log_filename = f"{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(Path(log_dir) / log_filename)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger
