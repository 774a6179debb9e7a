"""Logging configuration helpers."""

import logging

_QUIET_LOGGERS = ("httpx", "httpcore", "google_genai")


def configure_logging(level: str | int = logging.INFO) -> None:
    """Attach one stream handler to the diet_tracker logger tree.

    Safe to call repeatedly; later calls only change the level.
    """
    logger = logging.getLogger("diet_tracker")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    # httpx logs full request URLs, which carry the FDC api_key.
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
