"""Logging setup for the nutriscan package logger."""

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Attach one stream handler to the ``nutriscan`` logger.

    Repeated calls only adjust the level, so building several apps in one
    process (tests, reloaders) does not duplicate output.
    """
    logger = logging.getLogger("nutriscan")
    logger.setLevel(_resolve_level(level))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelNamesMapping().get(level.strip().upper())
    if resolved is None:
        raise ValueError(f"Unknown log level {level!r}")
    return resolved
