"""
Production settings for the pop receipt sample.

These settings target an Azure Container Apps job using Managed Identity
for storage access and Application Insights for log export.
"""

import logging

from decouple import config

from .base import *

# Configure logging first
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Get environment name
ENVIRONMENT = config("ENVIRONMENT", default="dev")

DEBUG = False

if not AZURE_STORAGE_CONNECTION_STRING and not AZURE_STORAGE_ACCOUNT_NAME:
    logger.warning(
        "Neither AZURE_STORAGE_CONNECTION_STRING nor AZURE_STORAGE_ACCOUNT_NAME is set"
    )

# Application Insights log export
APPLICATIONINSIGHTS_CONNECTION_STRING = config(
    "APPLICATIONINSIGHTS_CONNECTION_STRING", default=""
)

if APPLICATIONINSIGHTS_CONNECTION_STRING:
    try:
        from opencensus.ext.azure.log_exporter import AzureLogHandler  # noqa: F401

        LOGGING["handlers"]["azure"] = {
            "level": "INFO",
            "class": "opencensus.ext.azure.log_exporter.AzureLogHandler",
            "connection_string": APPLICATIONINSIGHTS_CONNECTION_STRING,
            "formatter": "verbose",
        }
        LOGGING["root"]["handlers"].append("azure")

        logger.info(f"Application Insights enabled for environment: {ENVIRONMENT}")
    except ImportError as e:
        logger.warning(f"Application Insights packages not installed: {e}. Telemetry disabled.")
else:
    logger.warning(
        "APPLICATIONINSIGHTS_CONNECTION_STRING not set. Application Insights disabled."
    )
