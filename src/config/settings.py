"""Django settings for the directions response model."""

from __future__ import annotations

import os

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-production")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"

INSTALLED_APPS: list[str] = []

LANGUAGE_CODE = os.getenv("DIRECTIONS_LANGUAGE_CODE", "en-us")
TIME_ZONE = os.getenv("DIRECTIONS_TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True
USE_THOUSAND_SEPARATOR = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "loggers": {
        "directions": {
            "handlers": ["console"],
            "level": os.getenv("DIRECTIONS_LOG_LEVEL", "WARNING"),
        },
    },
}

DIRECTIONS_MAX_COORDINATES = int(os.getenv("DIRECTIONS_MAX_COORDINATES", "100"))
