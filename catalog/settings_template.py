import os

import sentry_sdk
import structlog
from django.core.management.utils import get_random_secret_key
from sentry_sdk.integrations.django import DjangoIntegration

from catalog import get_version

DEFAULT_AUTO_FIELD = "django.db.models.AutoField"

# Build paths inside the project like this: os.path.join(SITE_ROOT_DIR, ...)
CATALOG_APP_DIR = os.path.abspath(os.path.dirname(__file__))
SITE_ROOT_DIR = os.path.dirname(CATALOG_APP_DIR)

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", get_random_secret_key())

CATALOG_ENVIRONMENT = os.environ.get("CATALOG_ENVIRONMENT", "development")

# Uploaded JSON files and media uploads are capped at the same size as a
# single downloaded image
DATA_UPLOAD_MAX_MEMORY_SIZE = 10485760
FILE_UPLOAD_MAX_MEMORY_SIZE = 10485760

ALLOWED_HOSTS = ["*"]

DEBUG = False
CSRF_COOKIE_SECURE = False

LANGUAGE_CODE = "en-us"
ROOT_URLCONF = "catalog.urls"
STATIC_ROOT = "static-files"
STATIC_URL = "/static/"

TIME_ZONE = "America/New_York"
USE_I18N = True
USE_TZ = True
WSGI_APPLICATION = "catalog.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRESQL_DB", "catalog"),
        "USER": os.getenv("POSTGRESQL_USER", "catalog"),
        "PASSWORD": os.getenv("POSTGRESQL_PW"),
        "HOST": os.getenv("POSTGRESQL_HOST", "localhost"),
        "PORT": os.getenv("POSTGRESQL_PORT", "5432"),
        "CONN_MAX_AGE": 0,
    }
}

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django_structlog",
    "rest_framework",
    "configuration",
    "media_library",
    "importer",
    "catalog.apps.CatalogAppConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "django_structlog.middlewares.RequestMiddleware",
]

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
    }
]

REDIS_ADDRESS = os.environ.get("REDIS_ADDRESS", "")
REDIS_PORT = os.environ.get("REDIS_PORT", "6379")


def cache_backend(database):
    """
    Redis cache on ``database`` when REDIS_ADDRESS is set, process memory
    otherwise
    """
    if not REDIS_ADDRESS:
        return {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}
    return {
        "BACKEND": "django_redis.cache.RedisCache",
        "LOCATION": f"redis://{REDIS_ADDRESS}:{REDIS_PORT}/{database}",
        "OPTIONS": {"CLIENT_CLASS": "django_redis.client.DefaultClient"},
    }


CACHES = {
    "default": cache_backend(1),
    "configuration_cache": cache_backend(3),
}

SESSION_ENGINE = "django.contrib.sessions.backends.db"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
        "rest_framework.parsers.MultiPartParser",
    ],
    "UNAUTHENTICATED_USER": None,
}

LOG_LEVEL = os.environ.get("CATALOG_LOG_LEVEL", "INFO")


def log_handler(formatter, level=LOG_LEVEL):
    return {"class": "logging.StreamHandler", "level": level, "formatter": formatter}


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "long": {
            "format": "[{asctime} {levelname} {name}:{lineno}] {message}",
            "datefmt": "%Y-%m-%dT%H:%M:%S",
            "style": "{",
        },
        "structlog_json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.JSONRenderer(),
        },
        "structlog_console": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.dev.ConsoleRenderer(),
        },
    },
    "handlers": {
        "stream": log_handler("long"),
        "structlog_console": log_handler("structlog_console"),
        "null": {"class": "logging.NullHandler", "level": LOG_LEVEL},
    },
    # Structured records go through their own handlers and never reach the
    # plain text ones
    "loggers": {
        **{
            name: {"handlers": ["stream"], "level": LOG_LEVEL}
            for name in ("django", "catalog")
        },
        **{
            name: {
                "handlers": ["structlog_console"],
                "level": LOG_LEVEL,
                "propagate": False,
            }
            for name in ("structlog", "django_structlog")
        },
    },
}

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


################################################################################
# Django-specific settings above
################################################################################

MEDIA_URL = "/media/"
MEDIA_ROOT = os.path.join(SITE_ROOT_DIR, "media")

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
    "media": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
}

#: Public base URL of this site, used to reach our own HTTP endpoints
SITE_URL = os.environ.get("SITE_URL", "http://localhost:8000")

SENTRY_BACKEND_DSN = os.environ.get("SENTRY_BACKEND_DSN", "")

APPLICATION_VERSION = get_version()

sentry_sdk.init(
    dsn=SENTRY_BACKEND_DSN,
    environment=CATALOG_ENVIRONMENT,
    release=APPLICATION_VERSION,
    integrations=[DjangoIntegration()],
)

# Importer settings
IMPORTER = {
    # Maps the content type identifiers accepted by the importer to models
    "CONTENT_TYPES": {
        "article": "catalog.Article",
        "product": "catalog.Product",
    },
    "BATCH_SIZE": 50,
    "IMAGE_CONCURRENCY": 4,
    "MAX_IMAGE_SIZE": 10 * 1024 * 1024,
    "DOWNLOAD_TIMEOUT": 15,
    "UPLOAD_URL": f"{SITE_URL}/media-library/upload/",
    "UPLOAD_TOKEN_ENV": "CATALOG_UPLOAD_TOKEN",
}

CONFIGURATION_CACHE_TIMEOUT = 3600  # One hour
