import sys
import logging


# Log level of the summary report. It lies between INFO and WARNING so that
# --report=minimal can show the report and nothing else.
REPORT = 25


class CrashingHandler(logging.StreamHandler):
    def emit(self, record):
        """Write the record and let any exception propagate"""
        self.stream.write(self.format(record) + self.terminator)
        self.flush()


class NiceFormatter(logging.Formatter):
    """
    Leave INFO and REPORT messages as they are, prefix all others with the
    level name ("WARNING: ...")
    """

    def format(self, record):
        message = super().format(record)
        if record.levelno in (logging.INFO, REPORT):
            return message
        return f"{record.levelname}: {message}"


def log_level(minimal: bool = False, quiet: bool = False, debug: int = 0) -> int:
    """
    >>> log_level(quiet=True, debug=1) == logging.DEBUG
    True
    >>> log_level(minimal=True, quiet=True) == logging.ERROR
    True
    """
    if debug > 0:
        return logging.DEBUG
    elif quiet:
        return logging.ERROR
    elif minimal:
        return REPORT
    return logging.INFO


def setup_logging(logger, log_to_stderr=True, minimal=False, quiet=False, debug=0):
    """
    Attach a handler to the given logger. Messages go to stderr unless
    log_to_stderr is False, in which case stdout is used.
    """
    logging.addLevelName(REPORT, "REPORT")
    level = log_level(minimal=minimal, quiet=quiet, debug=debug)
    handler = CrashingHandler(sys.stderr if log_to_stderr else sys.stdout)
    handler.setFormatter(NiceFormatter())
    handler.setLevel(level)
    logger.setLevel(level)
    logger.addHandler(handler)
