import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    console = {"level": level, "handlers": ["console"], "propagate": False}
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                }
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {
                "ngo_reports": {"level": level},
                "uvicorn": dict(console),
                "uvicorn.error": dict(console),
                "uvicorn.access": dict(console),
                # SQL echo stays off unless explicitly lowered here
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
