# gymdesk/settings.py
import logging
import os
from datetime import timedelta
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

# ------------------------------------------------------------
# Core
# ------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables early (deployments point GYMDESK_ENV_FILE at /etc/gymdesk.env)
load_dotenv(os.environ.get("GYMDESK_ENV_FILE", BASE_DIR / ".env"))


def env_bool(name: str, default: bool = False) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    return v.lower() in {"1", "true", "yes", "on"}


def env_list(name: str, default_list):
    v = os.environ.get(name)
    if not v:
        return default_list
    # comma-separated values, trimmed
    return [x.strip() for x in v.split(",") if x.strip()]


def env_int(name: str, default: int) -> int:
    v = os.environ.get(name)
    if v is None or not v.strip():
        return default
    try:
        return int(v)
    except ValueError:
        raise ImproperlyConfigured(f"{name} must be an integer, got {v!r}")


# SECRET KEY
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY") or "!!-dev-only-insecure-key-change-in-prod-!!"

# DEBUG
DEBUG = env_bool("DJANGO_DEBUG", default=False)

# Hosts & CSRF
DEFAULT_ALLOWED_HOSTS = ["localhost", "127.0.0.1"]
ALLOWED_HOSTS = env_list("DJANGO_ALLOWED_HOSTS", DEFAULT_ALLOWED_HOSTS)

DEFAULT_CSRF_TRUSTED = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
CSRF_TRUSTED_ORIGINS = env_list("DJANGO_CSRF_TRUSTED_ORIGINS", DEFAULT_CSRF_TRUSTED)

# ------------------------------------------------------------
# Applications
# ------------------------------------------------------------
INSTALLED_APPS = [
    # Project apps
    "users",

    # Django contrib
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "rest_framework",
    "corsheaders",
    "django_extensions",
    "django_filters",

    # Domain apps
    "members",
    "transactions",
    "campaigns",
    "activity_logs",
    "analytics",
]

AUTH_USER_MODEL = "users.User"

# ------------------------------------------------------------
# Middleware
# ------------------------------------------------------------
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",

    # CORS must come before CommonMiddleware
    "corsheaders.middleware.CorsMiddleware",

    # /api/members and /api/members/ resolve to the same view
    "gymdesk.middleware.APITrailingSlashMiddleware",

    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "gymdesk.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "gymdesk.wsgi.application"

# ------------------------------------------------------------
# Database
#   DB_ENGINE=sqlite gives a throwaway local database; anything else is Postgres
# ------------------------------------------------------------
if os.environ.get("DB_ENGINE", "postgres").lower() == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.environ.get("SQLITE_PATH", str(BASE_DIR / "db.sqlite3")),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("POSTGRES_DB", "gymdesk"),
            "USER": os.environ.get("POSTGRES_USER", "gymdesk"),
            "PASSWORD": os.environ.get("POSTGRES_PASSWORD", ""),
            "HOST": os.environ.get("POSTGRES_HOST", "localhost"),
            "PORT": os.environ.get("POSTGRES_PORT", "5432"),
        }
    }

# ------------------------------------------------------------
# Password validation
# ------------------------------------------------------------
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# ------------------------------------------------------------
# I18N / TZ
# ------------------------------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

# ------------------------------------------------------------
# Static
# ------------------------------------------------------------
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ------------------------------------------------------------
# Session provider
#
# GYMDESK_SKIP_AUTH swaps JWT authentication for a fixed OWNER identity.
# Local development only; refused outside DEBUG unless explicitly allowed.
# ------------------------------------------------------------
GYMDESK_SKIP_AUTH = env_bool("GYMDESK_SKIP_AUTH", False)
GYMDESK_ALLOW_SKIP_AUTH_IN_PROD = env_bool("GYMDESK_ALLOW_SKIP_AUTH_IN_PROD", False)

if GYMDESK_SKIP_AUTH and not DEBUG and not GYMDESK_ALLOW_SKIP_AUTH_IN_PROD:
    raise ImproperlyConfigured(
        "GYMDESK_SKIP_AUTH is enabled while DJANGO_DEBUG is off. "
        "Set GYMDESK_ALLOW_SKIP_AUTH_IN_PROD=1 if this is intentional."
    )

if GYMDESK_SKIP_AUTH:
    logging.getLogger("gymdesk").warning(
        "GYMDESK_SKIP_AUTH is on: every request runs as the fixed OWNER identity"
    )
    _AUTHENTICATION_CLASSES = ("users.authentication.FixedOwnerAuthentication",)
else:
    _AUTHENTICATION_CLASSES = ("users.authentication.JWTSessionAuthentication",)

# ------------------------------------------------------------
# Domain tuning
# ------------------------------------------------------------
# 403 reported as 401 (legacy clients expect a single auth failure status)
GYMDESK_COLLAPSE_AUTH_ERRORS = env_bool("GYMDESK_COLLAPSE_AUTH_ERRORS", False)

# extra attempts after a generated member/transaction code collides
GYMDESK_CODE_RETRY_ATTEMPTS = env_int("GYMDESK_CODE_RETRY_ATTEMPTS", 1)

GYMDESK_ACTIVITY_LOG_LIMIT = env_int("GYMDESK_ACTIVITY_LOG_LIMIT", 500)

# ------------------------------------------------------------
# DRF & JWT
# ------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": _AUTHENTICATION_CLASSES,
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "DEFAULT_FILTER_BACKENDS": (
        "django_filters.rest_framework.DjangoFilterBackend",
    ),
    "EXCEPTION_HANDLER": "gymdesk.exceptions.api_exception_handler",
    "DATETIME_FORMAT": "iso-8601",
    "COERCE_DECIMAL_TO_STRING": False,
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=env_int("JWT_ACCESS_MINUTES", 60)),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=env_int("JWT_REFRESH_DAYS", 1)),
    "AUTH_HEADER_TYPES": ("Bearer",),
    "AUTH_TOKEN_CLASSES": ("rest_framework_simplejwt.tokens.AccessToken",),
    "USER_ID_FIELD": "user_id",
    "USER_ID_CLAIM": "user_id",
    # Custom serializer including role and full_name
    "TOKEN_OBTAIN_SERIALIZER": "users.serializers.GymTokenObtainPairSerializer",
}

# ------------------------------------------------------------
# CORS
#   Set CORS_ALLOW_ALL=1 in env only if you *really* need it.
# ------------------------------------------------------------
CORS_ALLOW_ALL_ORIGINS = env_bool("CORS_ALLOW_ALL", False)
CORS_ALLOW_CREDENTIALS = True
if not CORS_ALLOW_ALL_ORIGINS:
    CORS_ALLOWED_ORIGINS = env_list("CORS_ALLOWED_ORIGINS", ["http://localhost:3000"])

# ------------------------------------------------------------
# Security (reverse proxy + HTTPS)
# ------------------------------------------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True

# Harden settings when not in DEBUG
if not DEBUG:
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True

    SECURE_HSTS_SECONDS = env_int("SECURE_HSTS_SECONDS", 63072000)
    SECURE_HSTS_INCLUDE_SUBDOMAINS = env_bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", True)
    SECURE_HSTS_PRELOAD = env_bool("SECURE_HSTS_PRELOAD", True)

    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = "DENY"

# ------------------------------------------------------------
# Logging (stdout for Gunicorn / journald)
# ------------------------------------------------------------
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "[%(levelname)s] %(asctime)s %(name)s: %(message)s"}
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        }
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO" if not DEBUG else "DEBUG",
    },
}
