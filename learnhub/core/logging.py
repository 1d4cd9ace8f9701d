import logging
import logging.config
from pathlib import Path

from learnhub.core.config import settings

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_logging_config(log_to_file: bool, log_dir: str, level: str) -> dict:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "detailed",
            "stream": "ext://sys.stdout"
        }
    }
    root_handlers = ["console"]
    app_handlers = ["console"]

    if log_to_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "detailed",
            "filename": str(Path(log_dir) / "app.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": str(Path(log_dir) / "error.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
        root_handlers = ["console", "file", "error_file"]
        app_handlers = ["console", "file", "error_file"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {"format": FORMAT}
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": root_handlers
        },
        "loggers": {
            "learnhub": {
                "level": level,
                "handlers": app_handlers,
                "propagate": False
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        }
    }


def configure_logging():
    if settings.LOG_TO_FILE:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(
        build_logging_config(settings.LOG_TO_FILE, settings.LOG_DIR, settings.LOG_LEVEL.upper())
    )
