import logging
from datetime import UTC, datetime

import pytz

# Setup Environment
TIMEZONE = pytz.timezone("America/New_York")

"""
Console logger setup
Every logger handed out here is cached so its level can be changed later
"""

Logger_Cache: dict[str, logging.Logger] = {}
Default_Level = logging.CRITICAL


def set_level(level: int) -> None:
    """Set the level for every logger created so far and for future ones."""
    global Default_Level
    Default_Level = level
    for logger in Logger_Cache.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


class LocalTimeFormatter(logging.Formatter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.est_tz = TIMEZONE

    def format(self, record):
        utc_dt = datetime.fromtimestamp(record.created, UTC).replace(tzinfo=pytz.utc)
        est_time = utc_dt.astimezone(self.est_tz)

        record.est_time = est_time.strftime("%I:%M:%S %p")
        record.name = record.name[0:20]
        if record.levelno == logging.WARN:
            self._style._fmt = "%(est_time)-10s %(name)-20s:%(levelname)-8s [ASAppleMusic] %(message)s"
        elif record.levelno >= logging.ERROR:
            self._style._fmt = "%(est_time)-10s %(name)-20s:%(levelname)-8s [ASAppleMusic] 🛑: %(message)s"
        else:
            self._style._fmt = "%(est_time)-10s %(name)-20s:%(levelname)-8s [ASAppleMusic] %(message)s"

        return super().format(record)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Return a console logger with the specified name."""
    if name in Logger_Cache:
        return Logger_Cache[name]

    if level is None:
        level = Default_Level
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, logging.StreamHandler):
            logger.removeHandler(handler)

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(LocalTimeFormatter())
    logger.addHandler(ch)

    logger.propagate = False

    Logger_Cache[name] = logger

    return logger


if __name__ == "__main__":
    set_level(logging.DEBUG)
    a = get_logger("test")
    a.info("this is a test")
    a.error("this is an error test")
