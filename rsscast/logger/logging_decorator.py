"""
Centralized Logging Utilities and Decorators

Provides the logging setup used by the rsscast CLI and a function decorator
for consistent entry/exit logging across the catalog, store and feed modules.

Usage:
    from rsscast.logger import setup_logging, log_function

    # Configure the package logger once, from the CLI
    logger = setup_logging(
        logger_name="rsscast",
        log_file="~/.rsscast/rsscast.log",
        verbose=True
    )

    # Decorate functions for automatic logging
    @log_function(logger_name="rsscast.catalog", log_args=True)
    def add_feed(store, link):
        ...

Library modules only ask for child loggers (``rsscast.db``, ``rsscast.feeds``,
``rsscast.catalog``); records propagate to whatever the CLI configured.
"""

import functools
import logging
import time
from pathlib import Path
from typing import Optional, Callable, Any


def setup_logging(
    logger_name: str,
    log_file: str = "~/.rsscast/rsscast.log",
    verbose: bool = False,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Set up logging with file and optional console handlers.

    Args:
        logger_name: Name for the logger (e.g., "rsscast")
        log_file: Path to log file (default: "~/.rsscast/rsscast.log")
        verbose: If True, add console handler with DEBUG level (default: False)
        level: Base logging level (default: logging.INFO)

    Returns:
        Configured logger instance

    Example:
        logger = setup_logging("rsscast", "~/.rsscast/rsscast.log", verbose=True)
        logger.info("Catalog opened")
    """
    logger = logging.getLogger(logger_name)

    # Avoid adding multiple handlers if already configured
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if verbose else level)

    # Create logs directory if needed
    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path)
    file_handler.setLevel(level)
    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    # Console handler for verbose mode
    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_formatter = logging.Formatter("DEBUG: %(message)s")
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    return logger


def log_function(
    logger_name: Optional[str] = None,
    level: int = logging.DEBUG,
    log_args: bool = False,
    log_result: bool = False,
    log_execution_time: bool = True,
) -> Callable:
    """
    Decorator to automatically log function entry, exit, execution time, and exceptions.

    Args:
        logger_name: Custom logger name (if None, uses the decorated function's module name)
        level: Log level for entry/exit messages (default: logging.DEBUG)
        log_args: If True, log function arguments (default: False)
        log_result: If True, log return value (default: False)
        log_execution_time: If True, log execution duration (default: True)

    Returns:
        Decorated function with logging

    Example:
        @log_function(logger_name="rsscast.feeds", log_args=True)
        def fetch_feed(url):
            ...

    Exceptions are logged with their execution time and re-raised unchanged.
    """

    def decorator(func: Callable) -> Callable:
        logger = logging.getLogger(logger_name or func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            func_name = func.__name__
            log_msg = f"Calling {func_name}"

            if log_args and (args or kwargs):
                args_repr = [repr(a) for a in args]
                kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
                all_args = ", ".join(args_repr + kwargs_repr)
                log_msg += f" with args: {all_args}"

            logger.log(level, log_msg)

            start_time = time.time()

            try:
                result = func(*args, **kwargs)

                execution_time = time.time() - start_time

                completion_msg = f"Completed {func_name}"

                if log_execution_time:
                    completion_msg += f" in {execution_time:.2f}s"

                if log_result:
                    completion_msg += f" with result: {result!r}"

                logger.log(level, completion_msg)

                return result

            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(
                    f"Exception in {func_name} after {execution_time:.2f}s: {type(e).__name__}: {e}",
                    exc_info=logger.isEnabledFor(logging.DEBUG),
                )
                raise

        return wrapper

    return decorator
