# blame_logging.py
import logging
import sys

import colorama
from colorama import Fore, Style
from typing_extensions import override

# Shared by every module. The module-level logging.info() & co. may be the
# very functions being trapped, so internal diagnostics never go through them.
LOGGER_NAME = "console_blame"

FORMAT_STRING = "%(asctime)s\tline: %(lineno)d\tfunction: %(funcName)s ---> %(message)s"


class ColoredFormatter(logging.Formatter):
    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def __init__(self, fmt: str = FORMAT_STRING):
        super().__init__(fmt)

    @override
    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{super().format(record)}{Style.RESET_ALL}"


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def logging_setup(level: int = logging.INFO, stream=None) -> logging.Logger:
    """
    Configure the console_blame logger.

    Only the package logger is touched, the host application's root logger
    keeps its own handlers. Calling this again replaces the previous handler.
    """
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False

    if logger.hasHandlers():
        logger.handlers.clear()

    stream = stream if stream is not None else sys.stderr
    isatty = getattr(stream, "isatty", None)

    if isatty is not None and isatty():
        colorama.just_fix_windows_console()
        console_formatter = ColoredFormatter()
    else:
        console_formatter = logging.Formatter(FORMAT_STRING)

    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)
    return logger
