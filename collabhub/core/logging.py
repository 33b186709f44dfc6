import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the package logger (idempotent)."""
    logger = logging.getLogger("collabhub")
    logger.setLevel(level.upper())
    if not any(getattr(h, "_collabhub", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._collabhub = True
        logger.addHandler(handler)
