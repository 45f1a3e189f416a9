"""
Shared authentication settings for the Azure Storage clients.

Supports both local development (Azurite connection string) and
production (Managed Identity).
"""

import logging
from typing import Optional

from azure.identity import DefaultAzureCredential
from django.conf import settings

logger = logging.getLogger(__name__)

_credential: Optional[DefaultAzureCredential] = None


def get_connection_string() -> str:
    return getattr(settings, "AZURE_STORAGE_CONNECTION_STRING", None) or ""


def get_account_url(service: str) -> str:
    """
    Build the account endpoint for a storage service.

    Args:
        service: One of "blob", "queue", "table"

    Raises:
        ValueError: If neither connection string nor account name is configured
    """
    account_name = getattr(settings, "AZURE_STORAGE_ACCOUNT_NAME", None)
    if not account_name:
        raise ValueError(
            "Either AZURE_STORAGE_CONNECTION_STRING or AZURE_STORAGE_ACCOUNT_NAME must be configured"
        )
    return f"https://{account_name}.{service}.core.windows.net"


def get_azure_credential() -> DefaultAzureCredential:
    """Create the Managed Identity credential once per process."""
    global _credential
    if _credential is None:
        logger.info("🔐 Creating DefaultAzureCredential for storage access")
        _credential = DefaultAzureCredential()
    return _credential
