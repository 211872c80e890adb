# booking_system/settings.py
#
# Purpose:
# - Project settings for the salon booking core.
#
# Notes for developers:
# - Everything deploy-specific is read from environment variables so the same
#   file works for local dev, tests and production.
# - SALON_BOOKING holds the booking defaults. Admins can override them at
#   runtime through configmgr.SystemSetting rows (see configmgr/utils.py).
# - SQLite runs every transaction in IMMEDIATE mode so that booking admission
#   (check-then-insert) takes the write lock up front. On PostgreSQL the
#   per-(staff, date) DayLock row lock provides the same guarantee.
#
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-key-change-me")
DEBUG = _env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "configmgr",
    "booking",
    "staff",
    "reports",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "booking_system.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# Database
# DATABASE_TIMEOUT bounds how long a request waits for the write lock before
# the core reports StorageUnavailable.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DATABASE_PATH", str(BASE_DIR / "db.sqlite3")),
        "OPTIONS": {
            "timeout": _env_int("DATABASE_TIMEOUT", 10),
            "transaction_mode": "IMMEDIATE",
        },
        # File-backed so tests can run admissions from several threads.
        "TEST": {
            "NAME": os.environ.get("DATABASE_TEST_PATH", str(BASE_DIR / "test_db.sqlite3")),
        },
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("DJANGO_TIME_ZONE", "Africa/Johannesburg")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

REST_FRAMEWORK = {
    "EXCEPTION_HANDLER": "booking.exceptions.api_exception_handler",
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
}

# Booking defaults (runtime overrides live in configmgr.SystemSetting)
SALON_BOOKING = {
    "SLOT_INTERVAL_MINUTES": _env_int("SALON_SLOT_INTERVAL_MINUTES", 30),
    "MIN_BOOKING_LEAD_MINUTES": _env_int("SALON_MIN_BOOKING_LEAD_MINUTES", 60),
    "BOOKING_WINDOW_DAYS": _env_int("SALON_BOOKING_WINDOW_DAYS", 30),
    "CURRENCY_CODE": os.environ.get("SALON_CURRENCY_CODE", "ZAR"),
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        app: {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
            "propagate": False,
        }
        for app in ("booking", "staff", "configmgr", "reports")
    },
}
