"""
Azure Storage Queue client for work announcements.

Every message is addressed by its id and the pop receipt returned by the
last operation on it. The service issues a new pop receipt whenever the
message is read or its visibility changes, so a receipt held across such a
change can no longer delete the message.
"""

import logging
from typing import Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.queue import QueueClient
from django.conf import settings

from apps.core.exceptions import ResourceSetupError, StorageOperationError

from ..types import QueueReceipt
from .credentials import get_account_url, get_azure_credential, get_connection_string

logger = logging.getLogger(__name__)


class QueueStorageClient:
    """
    Client for the sample's announcement queue.

    Messages are plain text; no base64 encode policy is applied.
    """

    def __init__(self, queue_name: Optional[str] = None):
        self.queue_name = queue_name or getattr(settings, "POPRECEIPT_QUEUE_NAME", "samplequeue")
        self._client = None

    def get_queue_client(self) -> QueueClient:
        """
        Get or create queue client with appropriate authentication.

        Raises:
            ValueError: If neither connection string nor account name is configured
        """
        if self._client is not None:
            return self._client

        connection_string = get_connection_string()

        if connection_string:
            logger.info("🔗 Using connection string for queue storage")
            self._client = QueueClient.from_connection_string(
                connection_string, queue_name=self.queue_name
            )
        else:
            account_url = get_account_url("queue")
            logger.info(f"🔐 Using Managed Identity for queue storage: {account_url}")
            self._client = QueueClient(
                account_url, queue_name=self.queue_name, credential=get_azure_credential()
            )

        return self._client

    def create_queue_if_not_exists(self) -> None:
        """
        Create the queue unless it already exists.

        Raises:
            ResourceSetupError: If the queue cannot be created
        """
        logger.info(f"📬 Creating queue {self.queue_name}")
        try:
            self.get_queue_client().create_queue()
            logger.info(f"✅ Created queue: {self.queue_name}")
        except ResourceExistsError:
            logger.debug(f"Queue already exists: {self.queue_name}")
        except AzureError as e:
            error = ResourceSetupError.from_azure_error("create queue", e)
            logger.error(f"❌ Error creating queue {self.queue_name}: {error}")
            raise error from e

    def add_message(self, content: str, visibility_timeout: int) -> QueueReceipt:
        """
        Enqueue a message that stays invisible for ``visibility_timeout`` seconds.

        Args:
            content: Message payload
            visibility_timeout: Initial visibility delay in seconds

        Returns:
            QueueReceipt with the new message id and pop receipt

        Raises:
            StorageOperationError: If the message cannot be added
        """
        try:
            message = self.get_queue_client().send_message(
                content, visibility_timeout=visibility_timeout
            )
        except AzureError as e:
            logger.error(f"❌ Failed to add message for {content}: {e}")
            raise StorageOperationError.from_azure_error("add message", e) from e

        logger.debug(
            f"📨 Added message {message.id} for {content} (invisible for {visibility_timeout}s)"
        )
        return QueueReceipt(message_id=message.id, pop_receipt=message.pop_receipt)

    def delete_message(self, receipt: QueueReceipt) -> None:
        """
        Delete a message using its pop receipt.

        The call is not retried. A stale receipt (the message was read or its
        visibility changed since ``receipt`` was issued) fails with
        ``PopReceiptMismatch`` or ``MessageNotFound``.

        Raises:
            StorageOperationError: If the service rejects the delete
        """
        try:
            self.get_queue_client().delete_message(receipt.message_id, receipt.pop_receipt)
        except AzureError as e:
            error = StorageOperationError.from_azure_error("delete message", e)
            logger.warning(f"⚠️ Could not delete message {receipt.message_id}: {error.code}")
            raise error from e

        logger.debug(f"🗑️ Deleted message {receipt.message_id}")

    def update_visibility(self, receipt: QueueReceipt, visibility_timeout: int) -> QueueReceipt:
        """
        Change when a message becomes visible again.

        Returns:
            QueueReceipt carrying the pop receipt issued by the update; the
            receipt passed in is stale afterwards

        Raises:
            StorageOperationError: If the service rejects the update
        """
        try:
            message = self.get_queue_client().update_message(
                receipt.message_id,
                pop_receipt=receipt.pop_receipt,
                visibility_timeout=visibility_timeout,
            )
        except AzureError as e:
            logger.error(f"❌ Failed to update message {receipt.message_id}: {e}")
            raise StorageOperationError.from_azure_error("update message", e) from e

        logger.debug(f"👁️ Message {receipt.message_id} visible in {visibility_timeout}s")
        return QueueReceipt(message_id=receipt.message_id, pop_receipt=message.pop_receipt)

    def delete_queue(self) -> bool:
        """
        Delete the queue and any messages left in it.

        Returns:
            True if the queue was deleted, False if it did not exist
        """
        logger.info(f"🗑️ Deleting queue {self.queue_name}")
        try:
            self.get_queue_client().delete_queue()
        except ResourceNotFoundError:
            logger.debug(f"Queue not found: {self.queue_name}")
            return False
        except AzureError as e:
            raise StorageOperationError.from_azure_error("delete queue", e) from e
        return True
