"""
Base Django settings for the pop receipt sample.

This file contains settings common to all environments.
Environment-specific settings should be in development.py or production.py.
"""

from pathlib import Path

from decouple import config

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config("SECRET_KEY", default="django-insecure-change-this-in-production")

DEBUG = config("DEBUG", default=False, cast=bool)

# Application definition
# No web surface: the sample runs as a management command only.
INSTALLED_APPS = [
    "apps.core",
    "apps.images",
]

# No relational database is used; state lives in Azure Storage.
DATABASES = {}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

# Azure Storage Configuration
# For local development, use connection string to Azurite
# For production, use AZURE_STORAGE_ACCOUNT_NAME with Managed Identity
AZURE_STORAGE_CONNECTION_STRING = config("AZURE_STORAGE_CONNECTION_STRING", default="")
AZURE_STORAGE_ACCOUNT_NAME = config("AZURE_STORAGE_ACCOUNT_NAME", default="")

# Face API Configuration
# Example: "https://face-popreceipt-dev.cognitiveservices.azure.com"
FACE_API_ENDPOINT = config("FACE_API_ENDPOINT", default="")
FACE_SUBSCRIPTION_KEY = config("FACE_SUBSCRIPTION_KEY", default="")
FACE_API_TIMEOUT = config("FACE_API_TIMEOUT", default=30, cast=int)

# Pop receipt workflow
POPRECEIPT_INPUT_DIRECTORY = config("POPRECEIPT_INPUT_DIRECTORY", default="testfolder")
POPRECEIPT_QUEUE_NAME = config("POPRECEIPT_QUEUE_NAME", default="samplequeue")
POPRECEIPT_CONTAINER_NAME = config("POPRECEIPT_CONTAINER_NAME", default="samplecontainer")
POPRECEIPT_TABLE_NAME = config("POPRECEIPT_TABLE_NAME", default="sampletable")
POPRECEIPT_PARTITION_KEY = config("POPRECEIPT_PARTITION_KEY", default="FaceImages")

# Blob and table work may take up to 15 minutes; after that the message
# becomes visible again for the reconciliation worker.
POPRECEIPT_VISIBILITY_TIMEOUT = config("POPRECEIPT_VISIBILITY_TIMEOUT", default=900, cast=int)

# An entity holds at most 252 properties, 3 of which are system properties.
POPRECEIPT_MAX_FACE_PROPERTIES = config("POPRECEIPT_MAX_FACE_PROPERTIES", default=250, cast=int)

# When True, an abandoned message is made visible again immediately instead
# of waiting for the visibility timeout to elapse.
POPRECEIPT_RELEASE_FAILED_MESSAGES = config(
    "POPRECEIPT_RELEASE_FAILED_MESSAGES", default=False, cast=bool
)

# Delete the queue, container and table once the batch completes
POPRECEIPT_CLEANUP_RESOURCES = config("POPRECEIPT_CLEANUP_RESOURCES", default=False, cast=bool)

# Logging Configuration
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
        "file": {
            "level": "INFO",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": BASE_DIR / "logs" / "popreceipt.log",
            "maxBytes": 1024 * 1024 * 15,  # 15MB
            "backupCount": 10,
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
    "loggers": {
        # Console output comes from the root handler
        "apps": {
            "handlers": ["file"],
            "level": "INFO",
            "propagate": True,
        },
        # The Azure SDK logs every HTTP request at INFO
        "azure": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}

# Create logs directory if it doesn't exist
LOGS_DIR = BASE_DIR / "logs"
LOGS_DIR.mkdir(exist_ok=True)
