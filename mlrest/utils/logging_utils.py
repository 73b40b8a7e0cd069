import logging
import logging.config
import sys

from mlrest.environment_variables import MLREST_LOGGING_LEVEL

# 2024/03/02 12:36:37 INFO mlrest.tracking.tracking_run: Submitted run 8c2f... to experiment 3
LOGGING_LINE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOGGING_DATETIME_FORMAT = "%Y/%m/%d %H:%M:%S"

_DEFAULT_LEVEL = "INFO"


class MlrestLoggingStream:
    """
    Stream behind the ``mlrest`` log handler. Writes go to whatever ``sys.stderr`` is at the
    time of the write, so redirecting stderr also redirects mlrest logs. Writes are dropped
    while the stream is disabled.
    """

    def __init__(self):
        self.enabled = True

    def write(self, text):
        if self.enabled:
            sys.stderr.write(text)

    def flush(self):
        if self.enabled:
            sys.stderr.flush()


MLREST_LOGGING_STREAM = MlrestLoggingStream()


def disable_logging():
    """Silence all mlrest log output until :py:func:`enable_logging` is called."""
    MLREST_LOGGING_STREAM.enabled = False


def enable_logging():
    MLREST_LOGGING_STREAM.enabled = True


def _get_logging_level():
    level = (MLREST_LOGGING_LEVEL.get() or _DEFAULT_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{MLREST_LOGGING_LEVEL} must be a logging level name, got {level!r}")
    return level


def _configure_mlrest_loggers(root_module_name):
    """
    Attach the mlrest handler to ``root_module_name``. The logger does not propagate, so
    applications configuring the root logger do not see mlrest records twice.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "mlrest_formatter": {
                    "format": LOGGING_LINE_FORMAT,
                    "datefmt": LOGGING_DATETIME_FORMAT,
                },
            },
            "handlers": {
                "mlrest_handler": {
                    "class": "logging.StreamHandler",
                    "formatter": "mlrest_formatter",
                    "stream": MLREST_LOGGING_STREAM,
                },
            },
            "loggers": {
                root_module_name: {
                    "handlers": ["mlrest_handler"],
                    "level": _get_logging_level(),
                    "propagate": False,
                },
            },
        }
    )
