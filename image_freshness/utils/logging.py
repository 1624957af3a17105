import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Set the process-wide level and a handler for module-level loggers."""
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


def setup_logger(name: str) -> logging.Logger:
    """Named logger with its own handler; its level follows configure_logging."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
