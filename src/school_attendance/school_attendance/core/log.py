from __future__ import annotations

import logging.config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# "<prefix>.school_attendance" whatever the import prefix is.
PACKAGE_LOGGER = __name__.rsplit(".", 2)[0]


def configure_logging(level: str = "INFO") -> None:
    level = (level or "INFO").upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "level": level,
                },
            },
            "loggers": {
                PACKAGE_LOGGER: {"handlers": ["console"], "level": level, "propagate": True},
            },
        }
    )
