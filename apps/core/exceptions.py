"""
Custom exceptions for the pop receipt sample.

Provides structured error handling with consistent log output across the
storage, queue, table and Face API integrations.
"""

import logging
from typing import Optional

from azure.core.exceptions import AzureError, HttpResponseError

logger = logging.getLogger(__name__)


class PopReceiptError(Exception):
    """Base exception class for all custom exceptions."""

    default_detail = "An error occurred"
    default_code = "error"

    def __init__(self, detail: Optional[str] = None, code: Optional[str] = None):
        self.detail = detail if detail is not None else self.default_detail
        self.code = code if code is not None else self.default_code
        super().__init__(self.detail)


class StorageOperationError(PopReceiptError):
    """Raised when an Azure Storage operation fails."""

    default_detail = "Storage operation failed"
    default_code = "storage_error"

    def __init__(self, operation: str, error_code: Optional[str] = None, detail: Optional[str] = None):
        self.operation = operation
        super().__init__(detail, error_code)

    @classmethod
    def from_azure_error(cls, operation: str, exc: AzureError) -> "StorageOperationError":
        """Build from an Azure SDK exception, keeping the service error code."""
        error_code = None
        if isinstance(exc, HttpResponseError):
            error_code = getattr(exc, "error_code", None)
        return cls(operation, error_code=error_code, detail=exc.message or str(exc))

    def __str__(self):
        return f"{self.operation} failed ({self.code}): {self.detail}"


class ResourceSetupError(StorageOperationError):
    """Raised when the queue, container or table cannot be created."""

    default_detail = "Resource setup failed"
    default_code = "resource_setup_error"


class FaceAPIError(PopReceiptError):
    """Raised when the Face API returns an error response."""

    default_detail = "Face API request failed"
    default_code = "face_api_error"

    def __init__(
        self,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        super().__init__(detail, code)

    def __str__(self):
        return f"{self.code}: {self.detail}"


class InputDirectoryNotFoundError(PopReceiptError):
    """Raised when the input image directory does not exist."""

    default_detail = "Input directory not found"
    default_code = "directory_not_found"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Input directory not found: {path}")


def log_unit_error(file_name: str, exc: Exception) -> None:
    """
    Log a per-image failure using the error taxonomy.

    Storage errors are logged with their service error code, Face API errors
    with code and message, and everything else generically.
    """
    if isinstance(exc, StorageOperationError):
        logger.error(
            f"❌ Storage error for {file_name}: {exc.code}",
            extra={"file_name": file_name, "error_code": exc.code, "operation": exc.operation},
        )
    elif isinstance(exc, FaceAPIError):
        logger.error(
            f"❌ Face API error for {file_name}: {exc.code} {exc.detail}",
            extra={"file_name": file_name, "error_code": exc.code, "status_code": exc.status_code},
        )
    elif isinstance(exc, (FileNotFoundError, IsADirectoryError, PermissionError)):
        logger.error(f"❌ Could not read {file_name}: {exc}", extra={"file_name": file_name})
    else:
        logger.error(
            f"❌ Exception while processing {file_name}: {exc}",
            extra={"file_name": file_name},
            exc_info=True,
        )
