import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging() -> logging.Logger:
    logger = logging.getLogger("ticketing")
    logger.setLevel(getattr(logging, _DEFAULT_LEVEL, logging.INFO))

    # avoid duplicate handlers on reload
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.setLevel(logger.level)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


logger = setup_logging()
