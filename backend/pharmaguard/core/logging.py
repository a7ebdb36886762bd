"""
Root logging setup. Imported once by the API entry point and the CLI.
"""
import logging
import logging.config
from typing import Optional

from pharmaguard.services.pharmacogenomics.config import get_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stream handler on the root logger."""
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {
            "level": (level or get_config().log_level).upper(),
            "handlers": ["console"],
        },
    })


configure_logging()
