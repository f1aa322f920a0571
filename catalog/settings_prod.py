import json
import os

from .secrets import get_secret
from .settings_template import *  # NOQA ignore=F405
from .settings_template import CATALOG_ENVIRONMENT, DATABASES, LOGGING

LOGGING["handlers"]["file"] = {
    "class": "logging.handlers.TimedRotatingFileHandler",
    "level": "INFO",
    "formatter": "long",
    "filename": "./logs/catalog-web.log",
    "when": "H",
    "interval": 3,
    "backupCount": 16,
}
LOGGING["handlers"]["structlog_file"] = {
    "class": "logging.handlers.TimedRotatingFileHandler",
    "level": "INFO",
    "formatter": "structlog_json",
    "filename": "./logs/catalog-json.log",
    "when": "H",
    "interval": 3,
    "backupCount": 16,
}
LOGGING["loggers"]["django"]["handlers"] = ["file"]
LOGGING["loggers"]["catalog"]["handlers"] = ["file"]
LOGGING["loggers"]["structlog"]["handlers"] = ["structlog_file"]
LOGGING["loggers"]["django_structlog"]["handlers"] = ["structlog_file"]

if os.getenv("AWS"):
    ENV_NAME = os.getenv("ENV_NAME")

    django_secret = json.loads(get_secret("catalog/%s/Django/SecretKey" % ENV_NAME))
    SECRET_KEY = django_secret["DjangoSecretKey"]

    postgres_secret = json.loads(
        get_secret("catalog/%s/DB/MasterUserPassword" % ENV_NAME)
    )
    DATABASES["default"].update({"PASSWORD": postgres_secret["password"]})

    # The importer reads its upload token from the environment first
    upload_secret = json.loads(get_secret("catalog/%s/UploadToken" % ENV_NAME))
    os.environ.setdefault("CATALOG_UPLOAD_TOKEN", upload_secret["token"])

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

CSRF_COOKIE_SECURE = True

S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME")

STORAGES = {
    "default": {
        "BACKEND": "storages.backends.s3boto3.S3Boto3Storage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
    "media": {
        "BACKEND": "storages.backends.s3boto3.S3Boto3Storage",
        "OPTIONS": {
            "bucket_name": S3_BUCKET_NAME,
            "location": "media-library",
            # Don't set an ACL on the files, inherit the bucket ACLs
            "default_acl": None,
        },
    },
}
AWS_STORAGE_BUCKET_NAME = S3_BUCKET_NAME

if CATALOG_ENVIRONMENT == "production":
    MEDIA_URL = os.getenv("MEDIA_URL", "https://%s.s3.amazonaws.com/" % S3_BUCKET_NAME)
