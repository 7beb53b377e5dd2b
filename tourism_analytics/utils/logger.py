"""
Logging Utility Module.

Provides centralized logging configuration for the analytics package,
the REST API and the command-line pipeline.
"""

import logging
import sys
from datetime import datetime

from tourism_analytics.config.config import logging_config, LOGS_DIR


def setup_logger(
    name: str,
    level: str = None,
    log_to_file: bool = True,
    log_to_console: bool = True
) -> logging.Logger:
    """
    Set up and return a logger with both file and console handlers.
    
    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to file
        log_to_console: Whether to log to console
    
    Returns:
        Configured logger instance
    """
    level = level or logging_config.level
    
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    
    # Prevent duplicate handlers
    if logger.handlers:
        return logger
    
    formatter = logging.Formatter(
        fmt=logging_config.format,
        datefmt=logging_config.date_format
    )
    
    if log_to_file:
        log_file = LOGS_DIR / f"{datetime.now().strftime('%Y%m%d')}_{logging_config.log_file}"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    
    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with default configuration.
    
    Logs to file only (no console output) so JSON written to stdout
    by the CLI stays clean.
    """
    return setup_logger(name, log_to_console=False)
