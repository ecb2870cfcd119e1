# logging_config.py

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_handler(destination: str) -> logging.Handler:
    """
    "-" logs to stderr; anything else is a file path opened in append mode.
    """
    if destination == "-":
        return logging.StreamHandler(sys.stderr)
    return logging.FileHandler(destination, mode="a", encoding="utf-8")


def setup_logging(destination: str = "-", debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)

    handler = build_handler(destination)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    # Route uvicorn's own loggers through the root handler.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    return handler
