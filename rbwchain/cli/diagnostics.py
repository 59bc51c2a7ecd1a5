"""Diagnostic output for the wrapper.

Every line goes to stderr with a fixed ``[rbwchain]`` tag. Errors are always
shown; warnings and debug lines only when debug mode is on. Secret values are
never passed to the logger, only variable names and sizes.
"""
import logging
import sys

TAG = "[rbwchain]"
LOGGER_NAME = "rbwchain"

_LEVEL_LABELS = {
    logging.CRITICAL: "Error: ",
    logging.ERROR: "Error: ",
    logging.WARNING: "Warning: ",
}


class TaggedFormatter(logging.Formatter):
    """Prefix records with the tag and a level label.

    Records logged with ``extra={"hint": True}`` skip the level label.
    """

    def format(self, record: logging.LogRecord) -> str:
        label = "" if getattr(record, "hint", False) else _LEVEL_LABELS.get(record.levelno, "")
        return f"{TAG} {label}{record.getMessage()}"


def configure_logging(debug: bool = False) -> logging.Logger:
    """
    Build the run's logger.

    Args:
        debug: Show warning and debug lines in addition to errors

    Returns:
        The configured ``rbwchain`` logger (pass it to each component)
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Reconfiguring replaces earlier handlers (tests call main() repeatedly)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(TaggedFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.ERROR)
    logger.propagate = False
    return logger
