"""
Logging Configuration for SleepTrip

This module provides centralized logging configuration that writes logs
to both console and timestamped log files in the logs/ directory.

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import logging
import time
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logging(log_level: str = "INFO", log_dir: str = None) -> str:
    """
    Configure logging for SleepTrip analyses.

    Sets up logging to both console and a timestamped log file.

    Parameters:
    -----------
    log_level : str
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        Default is INFO.
    log_dir : str, optional
        Custom log directory. If not provided, uses logs/ in the current
        working directory.

    Returns:
    --------
    str
        Path to the current log file.
    """
    if log_dir is None:
        log_dir = Path.cwd() / "logs"
    else:
        log_dir = Path(log_dir)

    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = log_dir / f"sleeptrip_{timestamp}.log"

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    detailed_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)-40s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(levelname)-8s | %(name)-30s | %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, let handlers filter

    # Remove any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # File handler with rotation (always captures DEBUG level)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized - Log file: {log_path}")
    logger.info(f"Console log level: {log_level}, File log level: DEBUG")

    return str(log_path)


def get_analysis_logger() -> logging.Logger:
    """
    Get the logger for analysis runs.

    Returns:
    --------
    logging.Logger
        Logger for analysis operations.
    """
    return logging.getLogger("sleeptrip.analysis")


class AnalysisLogContext:
    """
    Context manager that brackets an analysis run in the log.

    Usage:
    ------
    with AnalysisLogContext("Peak extraction subject 01"):
        # ... analysis code ...
    """

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.logger = get_analysis_logger()
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info("=" * 60)
        self.logger.info(f"STARTING: {self.operation_name}")
        self.logger.info("=" * 60)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - self.start_time

        if exc_type is not None:
            self.logger.error(f"FAILED: {self.operation_name} ({elapsed:.2f}s)")
            self.logger.error(f"Error: {exc_val}")
        else:
            self.logger.info(f"COMPLETED: {self.operation_name} ({elapsed:.2f}s)")

        self.logger.info("-" * 60)
        return False  # Don't suppress exceptions
