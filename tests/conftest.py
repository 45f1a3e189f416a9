"""
Pytest fixtures for testing.

Provides sample images, in-memory storage doubles and automatic mocking of
Azure services for unit tests.
"""

import io
from unittest.mock import MagicMock, patch

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from PIL import Image

from apps.images.services import credentials

from .doubles import InMemoryBlobs, InMemoryQueue, InMemoryTable


# ============================================================================
# Azure Service Mocks (auto-applied to all tests except azure_integration)
# ============================================================================


def _is_integration(request):
    return "azure_integration" in [marker.name for marker in request.node.iter_markers()]


@pytest.fixture(autouse=True)
def mock_azure_storage(request):
    """
    Automatically mock the Azure Storage SDK clients for all tests except
    azure_integration tests.

    This prevents tests from trying to connect to real Azure storage.
    """
    if _is_integration(request):
        yield
        return

    mock_blob_service = MagicMock()
    mock_queue_client = MagicMock()
    mock_table_service = MagicMock()

    with patch(
        "apps.images.services.blob_storage.BlobServiceClient"
    ) as blob_cls, patch(
        "apps.images.services.queue_storage.QueueClient"
    ) as queue_cls, patch(
        "apps.images.services.table_storage.TableServiceClient"
    ) as table_cls:
        blob_cls.from_connection_string.return_value = mock_blob_service
        blob_cls.return_value = mock_blob_service
        queue_cls.from_connection_string.return_value = mock_queue_client
        queue_cls.return_value = mock_queue_client
        table_cls.from_connection_string.return_value = mock_table_service
        table_cls.return_value = mock_table_service
        yield {
            "blob": mock_blob_service,
            "queue": mock_queue_client,
            "table": mock_table_service,
        }


@pytest.fixture(autouse=True)
def mock_azure_credentials(request):
    """
    Mock Azure credentials to prevent authentication attempts in unit tests.
    """
    credentials._credential = None

    if _is_integration(request):
        yield
        return

    mock_cred = MagicMock()
    with patch("apps.images.services.credentials.DefaultAzureCredential", return_value=mock_cred):
        yield mock_cred

    credentials._credential = None


@pytest.fixture(autouse=True)
def mock_requests_for_face_api(request):
    """
    Mock requests library to prevent HTTP calls to the Face API in unit tests.
    """
    if _is_integration(request):
        yield
        return

    mock_response = MagicMock()
    mock_response.ok = True
    mock_response.status_code = 200
    mock_response.json.return_value = []

    with patch("requests.post", return_value=mock_response) as mock_post:
        yield mock_post


# ============================================================================
# Sample images
# ============================================================================


def make_jpeg(color="red", size=(64, 64)) -> bytes:
    img = Image.new("RGB", size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def sample_jpeg():
    """JPEG bytes for a small solid-colour image."""
    return make_jpeg()


@pytest.fixture
def image_dir(tmp_path):
    """Input directory with two JPEGs and one file that must be ignored."""
    directory = tmp_path / "testfolder"
    directory.mkdir()
    (directory / "photo1.jpg").write_bytes(make_jpeg("red"))
    (directory / "photo2.jpg").write_bytes(make_jpeg("blue"))
    (directory / "notes.txt").write_text("not an image")
    return directory


@pytest.fixture
def memory_queue():
    return InMemoryQueue()


@pytest.fixture
def memory_blobs():
    return InMemoryBlobs()


@pytest.fixture
def memory_table():
    return InMemoryTable()


@pytest.fixture
def http_error():
    """Factory for Azure HttpResponseError with a service error code."""

    def _make(error_code, message="Service error", status_code=400):
        exc = HttpResponseError(message=message)
        exc.status_code = status_code
        exc.error_code = error_code
        return exc

    return _make


@pytest.fixture
def not_found_error():
    return ResourceNotFoundError(message="The specified resource does not exist.")
