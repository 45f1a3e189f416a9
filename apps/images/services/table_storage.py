"""
Azure Table Storage client for face metadata entities.
"""

import logging
from typing import Any, Dict, Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.data.tables import TableClient, TableServiceClient, UpdateMode
from django.conf import settings

from apps.core.exceptions import ResourceSetupError, StorageOperationError

from .credentials import get_account_url, get_azure_credential, get_connection_string

logger = logging.getLogger(__name__)


class TableStorageClient:
    """
    Client for the sample's metadata table.

    Entities are keyed by (partition key, row key); the row key is the image
    file name.
    """

    def __init__(self, table_name: Optional[str] = None):
        self.table_name = table_name or getattr(settings, "POPRECEIPT_TABLE_NAME", "sampletable")
        self._client = None

    def get_table_service_client(self) -> TableServiceClient:
        """
        Get or create table service client with appropriate authentication.

        Raises:
            ValueError: If neither connection string nor account name is configured
        """
        if self._client is not None:
            return self._client

        connection_string = get_connection_string()

        if connection_string:
            logger.info("🔗 Using connection string for table storage")
            self._client = TableServiceClient.from_connection_string(connection_string)
        else:
            endpoint = get_account_url("table")
            logger.info(f"🔐 Using Managed Identity for table storage: {endpoint}")
            self._client = TableServiceClient(endpoint, credential=get_azure_credential())

        return self._client

    def get_table_client(self) -> TableClient:
        return self.get_table_service_client().get_table_client(self.table_name)

    def create_table_if_not_exists(self) -> None:
        """
        Create the table unless it already exists.

        Raises:
            ResourceSetupError: If the table cannot be created
        """
        logger.info(f"🗄️ Creating table {self.table_name}")
        try:
            self.get_table_service_client().create_table_if_not_exists(self.table_name)
        except AzureError as e:
            error = ResourceSetupError.from_azure_error("create table", e)
            logger.error(f"❌ Error creating table {self.table_name}: {error}")
            raise error from e

    def upsert_entity(self, partition_key: str, row_key: str, properties: Dict[str, Any]) -> None:
        """
        Insert the entity or replace it entirely if it already exists.

        Raises:
            StorageOperationError: If the write fails
        """
        entity = {"PartitionKey": partition_key, "RowKey": row_key}
        entity.update(properties)

        try:
            self.get_table_client().upsert_entity(entity, mode=UpdateMode.REPLACE)
        except AzureError as e:
            logger.error(f"❌ Failed to write entity {partition_key}/{row_key}: {e}")
            raise StorageOperationError.from_azure_error("insert or replace entity", e) from e

        logger.debug(
            f"📝 Stored entity {partition_key}/{row_key} with {len(properties)} properties"
        )

    def get_entity(self, partition_key: str, row_key: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve an entity.

        Returns:
            The entity, or None if it does not exist (HTTP 404)

        Raises:
            StorageOperationError: For any other service failure
        """
        try:
            return dict(self.get_table_client().get_entity(partition_key, row_key))
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            logger.error(f"❌ Failed to read entity {partition_key}/{row_key}: {e}")
            raise StorageOperationError.from_azure_error("retrieve entity", e) from e

    def entity_exists(self, partition_key: str, row_key: str) -> bool:
        return self.get_entity(partition_key, row_key) is not None

    def delete_table(self) -> None:
        logger.info(f"🗑️ Deleting table {self.table_name}")
        try:
            self.get_table_service_client().delete_table(self.table_name)
        except AzureError as e:
            raise StorageOperationError.from_azure_error("delete table", e) from e
