import logging
from typing import Optional

from fluentcriteria.settings import settings as api_settings

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_configured = False


def setup_global_logging(level: str = "INFO") -> None:
    """Configure the root logger once in a standardized format.

    Args:
        level: Log level name (e.g., "DEBUG", "INFO")
    """
    global _configured
    if _configured:
        return
    lvl = _LEVELS.get(level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _configured = True


class Logger:
    """Thin wrapper over standard logging with a convenience message method.

    - Honors global configuration via `setup_global_logging`, driven by
      ``settings.LOG_LEVEL`` on first use.
    - Provides `.message(text)` which logs at `INFO` when LOG_LEVEL is INFO,
      at `DEBUG` when LOG_LEVEL is DEBUG, and at the configured level otherwise.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        if not _configured:
            setup_global_logging(api_settings.LOG_LEVEL)
        self._logger = logging.getLogger(name or __name__)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def message(self, msg: str, *args, **kwargs) -> None:
        level = (api_settings.LOG_LEVEL or "").upper()
        if level == "DEBUG":
            self.debug(msg, *args, **kwargs)
        elif level == "INFO" or level == "":  # UNSET treated as INFO
            self.info(msg, *args, **kwargs)
        else:
            lvl = _LEVELS.get(level, logging.INFO)
            self._logger.log(lvl, msg, *args, **kwargs)
