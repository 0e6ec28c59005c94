import logging
import sys
import typing

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_handler: typing.Optional[logging.Handler] = None


def configure_logging(
    level: typing.Union[int, str] = logging.INFO, stream: typing.Optional[typing.TextIO] = None
) -> logging.Logger:
    """Attach a stream handler to the package logger once and set its level."""
    global _handler
    logger = logging.getLogger("entity_docstore")
    if _handler is None:
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        logger.addHandler(_handler)
    logger.setLevel(level)
    return logger
