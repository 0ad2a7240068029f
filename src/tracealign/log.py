"""
Logging for the tracealign command-line tool

Standard output carries nothing but the search result (one
"position<TAB>score" line), so that it can be consumed by scripts. Everything
else, including "Query not found" and the scoring matrix printed with
--debug --debug, is logged to standard error.
"""
import sys
import logging


class CrashingHandler(logging.StreamHandler):
    def emit(self, record):
        """Unlike the method it overrides, this will not catch exceptions"""
        msg = self.format(record)
        stream = self.stream
        stream.write(msg)
        stream.write(self.terminator)
        self.flush()


class NiceFormatter(logging.Formatter):
    """
    Print INFO messages as they are, which is what a user of the command-line
    tool expects to see. Messages at any other level get a "LEVEL: " prefix.
    """

    def formatMessage(self, record):
        message = super().formatMessage(record)
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname}: {message}"


def log_level(quiet: bool = False, debug: int = 0) -> int:
    """
    Return the level for the given --quiet and --debug settings.

    --debug wins over --quiet. With --quiet, a search that finds nothing is
    silent and only the exit status tells.
    """
    if debug > 0:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def setup_logging(logger, quiet=False, debug=0, stream=None):
    """
    Attach a handler to logger that writes to stream (standard error by
    default) and set the level of both according to quiet and debug.

    Never pass sys.stdout here: it is reserved for the search result.
    """
    handler = CrashingHandler(sys.stderr if stream is None else stream)
    handler.setFormatter(NiceFormatter())
    level = log_level(quiet, debug)
    handler.setLevel(level)
    logger.setLevel(level)
    logger.addHandler(handler)
    return handler
