"""Unified logging facade for kernel PCA runs."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

DEFAULT_LOGGER_NAME = "kernel_pca"


class LoggingManager:
    """Logging manager wrapping a standard library logger."""

    def __init__(
        self,
        name: str = DEFAULT_LOGGER_NAME,
        level: int = logging.INFO,
        log_file: Optional[Union[str, Path]] = None,
        console: bool = True,
    ):
        """Initialize logging manager.

        Args:
            name: Logger name
            level: Logging level
            log_file: Optional log file path
            console: Whether to attach a console handler
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Prevent duplicate handlers
        if not self.logger.handlers:
            if console:
                self._setup_console_handler(level)

            if log_file:
                self._setup_file_handler(log_file)

    def _setup_console_handler(self, level: int) -> None:
        """Set up console logging handler."""
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)

        self.logger.addHandler(console_handler)

    def _setup_file_handler(self, log_file: Union[str, Path]) -> None:
        """Set up file logging handler.

        Args:
            log_file: Path to log file
        """
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
        file_handler.setFormatter(formatter)

        self.logger.addHandler(file_handler)

    def set_level(self, level: int) -> None:
        """Change the level of the logger and all of its handlers."""
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)

    def info(self, message: str, *args: Any) -> None:
        self.logger.info(message, *args)

    def debug(self, message: str, *args: Any) -> None:
        self.logger.debug(message, *args)

    def warning(self, message: str, *args: Any) -> None:
        self.logger.warning(message, *args)

    def error(self, message: str, *args: Any) -> None:
        self.logger.error(message, *args)

    def exception(self, message: str, *args: Any) -> None:
        """Log exception message with traceback."""
        self.logger.exception(message, *args)

    def log_metrics(self, metrics: Dict[str, Any]) -> None:
        """Log a flat dictionary of summary values on one line.

        Args:
            metrics: Dictionary of metrics to log
        """
        metrics_str = ", ".join([f"{k}: {v}" for k, v in metrics.items()])
        self.logger.info(f"Metrics: {metrics_str}")


# Global logging manager instances cache
_logger_cache: Dict[str, LoggingManager] = {}


def get_logger(name: str = DEFAULT_LOGGER_NAME, **kwargs: Any) -> LoggingManager:
    """Get or create logging manager for the given name.

    Names are nested under the ``kernel_pca`` namespace so that a single
    :func:`setup_logging` call controls the whole package.

    Args:
        name: Logger name
        **kwargs: Additional arguments for LoggingManager (only used on first call for each name)

    Returns:
        LoggingManager instance
    """
    if name != DEFAULT_LOGGER_NAME and not name.startswith(DEFAULT_LOGGER_NAME + "."):
        name = f"{DEFAULT_LOGGER_NAME}.{name}"
    if name not in _logger_cache:
        # Child loggers propagate to the package logger instead of printing twice.
        kwargs.setdefault("console", name == DEFAULT_LOGGER_NAME)
        kwargs.setdefault("level", logging.NOTSET)
        _logger_cache[name] = LoggingManager(name, **kwargs)

    return _logger_cache[name]


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> LoggingManager:
    """Set up the package-level logger.

    Args:
        level: Logging level
        log_file: Optional log file path

    Returns:
        Configured LoggingManager instance
    """
    manager = get_logger(DEFAULT_LOGGER_NAME, level=level, log_file=log_file)
    manager.set_level(level)
    if log_file and not any(
        isinstance(handler, logging.FileHandler) for handler in manager.logger.handlers
    ):
        manager._setup_file_handler(log_file)
    return manager


__all__ = ["LoggingManager", "get_logger", "setup_logging"]
