"""
Azure Blob Storage client for published images.

Supports both local development (Azurite) and production (Managed Identity).
"""

import logging
from typing import Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient
from django.conf import settings

from apps.core.exceptions import ResourceSetupError, StorageOperationError

from .credentials import get_account_url, get_azure_credential, get_connection_string

logger = logging.getLogger(__name__)


class BlobStorageClient:
    """
    Client for the sample's blob container.

    Automatically uses connection string for local development (Azurite)
    or Managed Identity for production deployment.
    """

    def __init__(self, container_name: Optional[str] = None):
        """Initialize blob service client."""
        self.container_name = container_name or getattr(
            settings, "POPRECEIPT_CONTAINER_NAME", "samplecontainer"
        )
        self._client = None

    def get_blob_service_client(self) -> BlobServiceClient:
        """
        Get or create blob service client with appropriate authentication.

        Returns:
            BlobServiceClient instance

        Raises:
            ValueError: If neither connection string nor account name is configured
        """
        if self._client is not None:
            return self._client

        connection_string = get_connection_string()

        if connection_string:
            logger.info("🔗 Using connection string for blob storage")
            self._client = BlobServiceClient.from_connection_string(connection_string)
        else:
            account_url = get_account_url("blob")
            logger.info(f"🔐 Using Managed Identity for blob storage: {account_url}")
            self._client = BlobServiceClient(account_url, credential=get_azure_credential())

        return self._client

    def get_container_client(self) -> ContainerClient:
        return self.get_blob_service_client().get_container_client(self.container_name)

    def create_container_if_not_exists(self) -> ContainerClient:
        """
        Create the container unless it already exists.

        Raises:
            ResourceSetupError: If the container cannot be created
        """
        container_client = self.get_container_client()
        logger.info(f"📦 Creating container {self.container_name}")
        try:
            container_client.create_container()
            logger.info(f"✅ Created container: {self.container_name}")
        except ResourceExistsError:
            logger.debug(f"Container already exists: {self.container_name}")
        except AzureError as e:
            error = ResourceSetupError.from_azure_error("create container", e)
            logger.error(f"❌ Error creating container {self.container_name}: {error}")
            raise error from e
        return container_client

    def upload_file(self, blob_name: str, file_path: str) -> str:
        """
        Upload a local file, overwriting any existing blob of the same name.

        Args:
            blob_name: Blob name within the container
            file_path: Local file path to upload

        Returns:
            Full blob URL

        Raises:
            StorageOperationError: If upload fails
        """
        blob_client = self.get_container_client().get_blob_client(blob_name)

        logger.info(f"📤 Uploading to {self.container_name}/{blob_name}")

        try:
            with open(file_path, "rb") as data:
                blob_client.upload_blob(data, overwrite=True)
        except AzureError as e:
            logger.error(f"❌ Upload failed: {e}")
            raise StorageOperationError.from_azure_error("upload blob", e) from e

        blob_url = blob_client.url
        logger.info(f"✅ Upload complete: {blob_url}")

        return blob_url

    def blob_exists(self, blob_name: str) -> bool:
        """
        Check if blob exists.

        Raises:
            StorageOperationError: If the service cannot answer
        """
        blob_client = self.get_container_client().get_blob_client(blob_name)
        try:
            return blob_client.exists()
        except AzureError as e:
            logger.error(f"❌ Error checking blob existence: {e}")
            raise StorageOperationError.from_azure_error("check blob", e) from e

    def delete_container(self) -> bool:
        """
        Delete the container and every blob in it.

        Returns:
            True if the container was deleted, False if it did not exist
        """
        logger.info(f"🗑️ Deleting container {self.container_name}")
        try:
            self.get_container_client().delete_container()
        except ResourceNotFoundError:
            logger.debug(f"Container not found: {self.container_name}")
            return False
        except AzureError as e:
            raise StorageOperationError.from_azure_error("delete container", e) from e

        logger.info("✅ Deletion complete")
        return True
