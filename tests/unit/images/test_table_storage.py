"""
Unit tests for TableStorageClient.
"""

import pytest
from unittest.mock import patch

from azure.data.tables import UpdateMode

from apps.core.exceptions import ResourceSetupError, StorageOperationError
from apps.images.services.table_storage import TableStorageClient


class TestTableStorageClient:
    """Test suite for TableStorageClient."""

    @patch('apps.images.services.table_storage.TableServiceClient')
    def test_get_table_service_client_with_managed_identity(
        self, mock_table_cls, mock_azure_credentials, settings
    ):
        settings.AZURE_STORAGE_CONNECTION_STRING = ""
        settings.AZURE_STORAGE_ACCOUNT_NAME = "teststorage"

        TableStorageClient("sampletable").get_table_service_client()

        mock_table_cls.assert_called_once_with(
            "https://teststorage.table.core.windows.net",
            credential=mock_azure_credentials,
        )

    def test_get_table_service_client_raises_without_config(self, settings):
        settings.AZURE_STORAGE_CONNECTION_STRING = ""
        settings.AZURE_STORAGE_ACCOUNT_NAME = ""

        with pytest.raises(ValueError, match="AZURE_STORAGE_ACCOUNT_NAME"):
            TableStorageClient("sampletable").get_table_service_client()

    def test_create_table(self, mock_azure_storage):
        TableStorageClient("sampletable").create_table_if_not_exists()

        mock_azure_storage["table"].create_table_if_not_exists.assert_called_once_with("sampletable")

    def test_create_table_failure_raises_setup_error(self, mock_azure_storage, http_error):
        mock_azure_storage["table"].create_table_if_not_exists.side_effect = http_error(
            "InvalidResourceName"
        )

        with pytest.raises(ResourceSetupError):
            TableStorageClient("sampletable").create_table_if_not_exists()

    def test_upsert_entity_replaces(self, mock_azure_storage):
        """Test insert-or-replace with partition key, row key and properties."""
        table_client = mock_azure_storage["table"].get_table_client.return_value

        TableStorageClient("sampletable").upsert_entity(
            "FaceImages", "photo1.jpg", {"person1": "34", "person2": "27"}
        )

        mock_azure_storage["table"].get_table_client.assert_called_with("sampletable")
        table_client.upsert_entity.assert_called_once_with(
            {
                "PartitionKey": "FaceImages",
                "RowKey": "photo1.jpg",
                "person1": "34",
                "person2": "27",
            },
            mode=UpdateMode.REPLACE,
        )

    def test_upsert_entity_without_properties(self, mock_azure_storage):
        table_client = mock_azure_storage["table"].get_table_client.return_value

        TableStorageClient("sampletable").upsert_entity("FaceImages", "empty.jpg", {})

        entity = table_client.upsert_entity.call_args[0][0]
        assert entity == {"PartitionKey": "FaceImages", "RowKey": "empty.jpg"}

    def test_upsert_entity_failure(self, mock_azure_storage, http_error):
        table_client = mock_azure_storage["table"].get_table_client.return_value
        table_client.upsert_entity.side_effect = http_error("PropertiesNeedValue")

        with pytest.raises(StorageOperationError) as exc_info:
            TableStorageClient("sampletable").upsert_entity("FaceImages", "photo1.jpg", {})

        assert exc_info.value.code == "PropertiesNeedValue"

    def test_get_entity(self, mock_azure_storage):
        table_client = mock_azure_storage["table"].get_table_client.return_value
        table_client.get_entity.return_value = {
            "PartitionKey": "FaceImages",
            "RowKey": "photo1.jpg",
            "person1": "34",
        }

        client = TableStorageClient("sampletable")

        assert client.get_entity("FaceImages", "photo1.jpg")["person1"] == "34"
        assert client.entity_exists("FaceImages", "photo1.jpg") is True

    def test_missing_entity(self, mock_azure_storage, not_found_error):
        table_client = mock_azure_storage["table"].get_table_client.return_value
        table_client.get_entity.side_effect = not_found_error

        client = TableStorageClient("sampletable")

        assert client.get_entity("FaceImages", "photo1.jpg") is None
        assert client.entity_exists("FaceImages", "photo1.jpg") is False

    def test_get_entity_service_error(self, mock_azure_storage, http_error):
        table_client = mock_azure_storage["table"].get_table_client.return_value
        table_client.get_entity.side_effect = http_error("InternalError", status_code=500)

        with pytest.raises(StorageOperationError):
            TableStorageClient("sampletable").entity_exists("FaceImages", "photo1.jpg")

    def test_delete_table(self, mock_azure_storage):
        TableStorageClient("sampletable").delete_table()

        mock_azure_storage["table"].delete_table.assert_called_once_with("sampletable")
