from .logging_manager import LoggingManager, get_logger, setup_logging

__all__ = ["LoggingManager", "get_logger", "setup_logging"]
