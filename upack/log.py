import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

QUIET, DEBUG, VERBOSE = 0, 1, 2

_LEVELS = {
    QUIET: logging.WARNING,
    DEBUG: logging.DEBUG,
    VERBOSE: TRACE,
}


def clamp_verbosity(count: int) -> int:
    return max(QUIET, min(VERBOSE, count))


def configure(verbosity: int, stream=None) -> logging.Logger:
    """Route upack's loggers to ``stream`` (stderr by default).

    0 shows warnings only, 1 adds debug output (the build tool's own
    output), 2 adds a trace line for every step and archive entry.
    """
    logger = logging.getLogger("upack")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(_LEVELS[clamp_verbosity(verbosity)])
    return logger


def trace(logger: logging.Logger, msg: str, *args) -> None:
    logger.log(TRACE, msg, *args)
