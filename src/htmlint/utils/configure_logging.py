# src/htmlint/utils/configure_logging.py
import logging
import sys
from typing import Dict, Optional, Union

from tqdm import tqdm

LevelType = Union[str, int]

LOG_FORMAT = "%(levelname)s - [%(name)s] - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"


class LogWithTqdm(logging.Handler):
    """
    Routes log records through `tqdm.write()` so they do not break the
    file progress bar. Findings go to stdout; logs always go to stderr.
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level: LevelType, fallback: int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def configure_logger(
    general_level: LevelType = 'WARNING',
    module_specific_levels: Optional[Dict[str, LevelType]] = None,
    silenced_loggers: Optional[Dict[str, LevelType]] = None,
) -> None:
    """
    Configures the root logger with the tqdm-aware handler.
    The command line defaults to WARNING so only configuration problems and
    per-file failures show up next to the report.
    """
    log_level = _to_level(general_level, logging.WARNING)

    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT if log_level <= logging.DEBUG else LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    # Muzzle noisy loggers by setting their level high.
    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))
