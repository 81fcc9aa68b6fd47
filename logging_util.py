import logging

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

_level = logging.INFO
_loggers = {}


def setup_logger(name: str = "streamchat", level: int | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(_level if level is None else level)
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    _loggers[name] = logger
    return logger


def set_level(level: int):
    """Apply ``level`` to existing loggers and to those created later."""
    global _level
    _level = level
    for logger in _loggers.values():
        logger.setLevel(level)
