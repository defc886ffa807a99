import logging
import sys

# Custom levels used by the CLI
SUCCESS_LEVEL = 25
NOTICE_LEVEL = 35

logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")
logging.addLevelName(NOTICE_LEVEL, "NOTICE")


class ColoredFormatter(logging.Formatter):
    """Formatter that colours messages by level when stderr is a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "SUCCESS": "\033[92m",  # Bright Green
        "WARNING": "\033[33m",  # Yellow
        "NOTICE": "\033[96m",  # Bright Cyan
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str = None, datefmt: str = None):
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        if sys.stderr.isatty():
            level_color = self.COLORS.get(record.levelname, "")
            return f"{level_color}{message}{self.COLORS['RESET']}"

        return message


def setup_colored_logging(level: int = logging.INFO, verbose: bool = False) -> None:
    """
    Configure the root logger for the review CLI.

    Args:
        level: Logging level (default: logging.INFO)
        verbose: Include timestamps and logger names in each line
    """
    if verbose:
        fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    else:
        fmt = "%(message)s"
    formatter = ColoredFormatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


class EnhancedLogger:
    """Logger wrapper adding success() and notice()."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def success(self, msg, *args, **kwargs):
        """Log with SUCCESS level (bright green) - completed operations."""
        self._logger.log(SUCCESS_LEVEL, msg, *args, **kwargs)

    def notice(self, msg, *args, **kwargs):
        """Log with NOTICE level (bright cyan) - things the user must act on."""
        self._logger.log(NOTICE_LEVEL, msg, *args, **kwargs)

    # debug/info/warning/error and the rest go straight to the wrapped logger
    def __getattr__(self, name):
        return getattr(self._logger, name)


def get_colored_logger(name: str) -> EnhancedLogger:
    """
    Get an enhanced logger instance with the custom level methods.

    Args:
        name: Logger name (typically __name__)
    """
    return EnhancedLogger(logging.getLogger(name))
