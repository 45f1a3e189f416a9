"""
Services for the pop receipt workflow.

Provides blob, queue and table storage access and Face API detection.
"""

from .blob_storage import BlobStorageClient
from .face_client import FaceClient
from .queue_storage import QueueStorageClient
from .table_storage import TableStorageClient

__all__ = ["BlobStorageClient", "FaceClient", "QueueStorageClient", "TableStorageClient"]
