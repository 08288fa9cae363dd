import logging
import os
from datetime import UTC, datetime
from logging.handlers import TimedRotatingFileHandler

import pytz

"""
Multi-logger setup
logs to console and optionally to a rotating file under /tmp/log
"""

LOG_DIR = "/tmp/log/podcast-insights"

Logger_Cache: dict[str, logging.Logger] = {}
Default_Level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
if not isinstance(Default_Level, int):
    Default_Level = logging.INFO


def set_level(level):
    global Default_Level
    Default_Level = level
    for logger in Logger_Cache.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def _display_timezone():
    try:
        return pytz.timezone(os.getenv("LOG_TIMEZONE", "America/New_York"))
    except pytz.UnknownTimeZoneError:
        return pytz.utc


class LocalTimeFormatter(logging.Formatter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.display_tz = _display_timezone()

    def format(self, record):
        utc_dt = datetime.fromtimestamp(record.created, UTC).replace(tzinfo=pytz.utc)
        local_time = utc_dt.astimezone(self.display_tz)

        record.local_time = local_time.strftime("%I:%M:%S %p")
        record.short_name = record.name[0:24]
        if record.levelno == logging.WARNING:
            self._style._fmt = (
                "%(local_time)-10s %(short_name)-24s:%(levelname)-8s =====> Warning %(message)s"
            )
        elif record.levelno >= logging.ERROR:
            self._style._fmt = (
                "\n%(local_time)-10s %(short_name)-24s =====> ERROR \n%(message)s\n---END ERROR ---\n"
            )
        else:
            self._style._fmt = "%(local_time)-10s %(short_name)-24s:%(levelname)-8s %(message)s"

        return super().format(record)


class LocalFileFormatter(logging.Formatter):
    def format(self, record):
        utc_dt = datetime.fromtimestamp(record.created, UTC).replace(tzinfo=pytz.utc)
        record.utc_time = utc_dt.strftime("%Y-%m-%d %H:%M:%S")
        if record.levelno >= logging.WARNING:
            self._style._fmt = (
                "\n===== %(levelname)s Source: %(name)s =====\n%(utc_time)s:%(message)s\n---END ---\n"
            )
        else:
            self._style._fmt = "%(utc_time)s:%(name)15s:%(levelname)s %(message)s"

        return super().format(record)


def get_logger(name: str, level=None, filename=None) -> logging.Logger:
    """Return a logger with the specified name."""
    if name in Logger_Cache:
        return Logger_Cache[name]

    if level is None:
        level = Default_Level
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(LocalTimeFormatter())
    logger.addHandler(ch)

    if filename:
        os.makedirs(LOG_DIR, exist_ok=True)
        fullpath = os.path.join(LOG_DIR, os.path.basename(filename))
        fh_formatter = LocalFileFormatter()
        fh = TimedRotatingFileHandler(fullpath, when="midnight", backupCount=30)
        fh.setLevel(level)
        fh.setFormatter(fh_formatter)
        logger.addHandler(fh)

    logger.propagate = False

    Logger_Cache[name] = logger

    return logger


if __name__ == "__main__":
    a = get_logger("test")
    a.info("this is a test")
    a.error("this is an error test")
