"""
Logging Setup

One-call helper for applications embedding blockledger. The library itself
only creates module loggers and never configures handlers on import.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .config import LOG_DATE_FORMAT, LOG_FORMAT, get_log_level


def setup_logging(
    level: Optional[Union[str, int]] = None,
    log_dir: Optional[str] = None
) -> Optional[Path]:
    """
    Configure the root logger to log to the console and an optional file.

    Args:
        level: Level name or number (default: BLOCKLEDGER_LOG_LEVEL or INFO)
        log_dir: Directory for a timestamped log file

    Returns:
        Path of the log file if one was created, else None
    """
    if level is None:
        level = get_log_level()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = Path(log_dir) / f"blockledger_{ts}.log"
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        return log_path
    return None
