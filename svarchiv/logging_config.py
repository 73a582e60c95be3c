"""
Logging setup for the CLI.

Library modules only create module loggers (logging.getLogger(__name__));
svarchiv.cli calls setup_logging() once, so rejected termine.txt lines,
missing data files and Docs API errors show up on stderr while command
output stays on stdout.
"""

import logging
import sys


class _ColoredFormatter(logging.Formatter):
    _COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    _RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self._COLORS.get(record.levelname, '')
        if color:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self._RESET}"
        return super().format(record)


def setup_logging(level: int | str = logging.INFO) -> None:
    """Console logging on stderr, so command output on stdout stays clean."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    log_format = '%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    formatter = (
        _ColoredFormatter(log_format, datefmt=date_format)
        if sys.stderr.isatty()
        else logging.Formatter(log_format, datefmt=date_format)
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger('urllib3').setLevel(logging.WARNING)
