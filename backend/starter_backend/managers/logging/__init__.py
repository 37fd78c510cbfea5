from .logging_manager import JSONFormatter, LoggingManager, setup_logging

__all__ = ["JSONFormatter", "LoggingManager", "setup_logging"]
