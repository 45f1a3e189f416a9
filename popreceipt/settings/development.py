"""
Development settings for the pop receipt sample.

Defaults to the local Azurite emulator when no storage account is configured.
"""

from decouple import config

from .base import *

DEBUG = True

# Azurite well-known development account
# Start it with: azurite --silent --location .azurite
AZURITE_CONNECTION_STRING = (
    "DefaultEndpointsProtocol=http;"
    "AccountName=devstorageaccount1;"
    "AccountKey=Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw==;"
    "BlobEndpoint=http://127.0.0.1:10000/devstorageaccount1;"
    "QueueEndpoint=http://127.0.0.1:10001/devstorageaccount1;"
    "TableEndpoint=http://127.0.0.1:10002/devstorageaccount1;"
)

if not AZURE_STORAGE_CONNECTION_STRING and not AZURE_STORAGE_ACCOUNT_NAME:
    AZURE_STORAGE_CONNECTION_STRING = config(
        "AZURITE_CONNECTION_STRING", default=AZURITE_CONNECTION_STRING
    )

# Additional logging in development
LOGGING["loggers"]["apps"]["level"] = "DEBUG"
LOGGING["handlers"]["console"]["level"] = "DEBUG"
