"""
Pop receipt coordination for publishing images with face metadata.

Each image is one unit of work that touches two non-transactional resources:
a blob holding the image and a table entity holding the estimated ages.

    1. announce     enqueue the file name, invisible for the visibility timeout
    2. perform      detect faces, upload the blob, insert-or-replace the entity
    3. acknowledge  if blob and entity both exist, delete the message using
                    the pop receipt returned in step 1

A message is removed only when both resources are confirmed. Messages that
remain in the queue become visible once the timeout elapses and mark the
images a reconciliation worker still has to finish.
"""

import logging
from pathlib import Path
from typing import List, Optional

from django.conf import settings

from apps.core.exceptions import (
    InputDirectoryNotFoundError,
    StorageOperationError,
    log_unit_error,
)

from .services import BlobStorageClient, FaceClient, QueueStorageClient, TableStorageClient
from .types import BatchSummary, DetectedFace, QueueReceipt, UnitOutcome, UnitResult

logger = logging.getLogger(__name__)

IMAGE_SUFFIX = ".jpg"


class ImageProcessor:
    """
    Process every image in a directory one at a time.

    Clients default to instances configured from Django settings; pass them
    explicitly to share or replace them.
    """

    def __init__(
        self,
        queue: Optional[QueueStorageClient] = None,
        blobs: Optional[BlobStorageClient] = None,
        table: Optional[TableStorageClient] = None,
        face_client: Optional[FaceClient] = None,
    ):
        self.queue = queue or QueueStorageClient()
        self.blobs = blobs or BlobStorageClient()
        self.table = table or TableStorageClient()
        self.face_client = face_client or FaceClient()

        self.partition_key = getattr(settings, "POPRECEIPT_PARTITION_KEY", "FaceImages")
        self.visibility_timeout = getattr(settings, "POPRECEIPT_VISIBILITY_TIMEOUT", 900)
        self.max_face_properties = getattr(settings, "POPRECEIPT_MAX_FACE_PROPERTIES", 250)
        self.release_failed_messages = getattr(
            settings, "POPRECEIPT_RELEASE_FAILED_MESSAGES", False
        )

    def setup(self) -> None:
        """
        Create the queue, container and table if they are absent.

        Raises:
            ResourceSetupError: If any resource cannot be created
        """
        self.queue.create_queue_if_not_exists()
        self.blobs.create_container_if_not_exists()
        self.table.create_table_if_not_exists()

    def cleanup(self) -> None:
        """Delete the queue, container and table, continuing past failures."""
        logger.info("🧹 Cleaning up the queue, table and the blobs created")

        for name, delete in (
            ("queue", self.queue.delete_queue),
            ("container", self.blobs.delete_container),
            ("table", self.table.delete_table),
        ):
            try:
                delete()
            except StorageOperationError as e:
                logger.error(f"❌ Storage error deleting {name}: {e.code}")
            except Exception as e:
                logger.error(f"❌ Exception deleting {name}: {e}")

    def announce(self, file_name: str) -> QueueReceipt:
        """Enqueue the intent to publish ``file_name``."""
        return self.queue.add_message(file_name, visibility_timeout=self.visibility_timeout)

    def build_properties(self, faces: List[DetectedFace]) -> dict:
        """Map faces to ``person1..personN`` age properties, capped."""
        return {
            f"person{index}": face.age_label
            for index, face in enumerate(faces[: self.max_face_properties], start=1)
        }

    def perform(self, file_name: str, file_path: Path) -> List[DetectedFace]:
        """
        Detect faces, publish the blob and store the metadata entity.

        The blob is uploaded only if at least one face was detected. The
        entity is always written. Any exception stops the remaining steps.
        """
        image = file_path.read_bytes()

        faces = self.face_client.detect(image, attributes=("age",))
        logger.info(f"🙂 {len(faces)} face(s) detected in {file_name}")

        if len(faces) > self.max_face_properties:
            logger.warning(
                f"⚠️ Keeping the first {self.max_face_properties} of {len(faces)} faces in {file_name}"
            )

        if faces:
            self.blobs.upload_file(file_name, str(file_path))

        self.table.upsert_entity(self.partition_key, file_name, self.build_properties(faces))
        return faces

    def acknowledge(self, file_name: str, receipt: QueueReceipt) -> UnitOutcome:
        """
        Delete the announcement if both the blob and the entity exist.

        A stale pop receipt makes the delete fail; the error propagates and
        the message stays in the queue.
        """
        blob_present = self.blobs.blob_exists(file_name)
        entity_present = self.table.entity_exists(self.partition_key, file_name)

        if blob_present and entity_present:
            self.queue.delete_message(receipt)
            logger.info(f"✅ {file_name} published, message {receipt.message_id} deleted")
            return UnitOutcome.ACKNOWLEDGED

        logger.info(
            f"⏸️ {file_name} incomplete (blob={blob_present}, entity={entity_present}), "
            f"message {receipt.message_id} left for reconciliation"
        )
        if self.release_failed_messages:
            self.release(receipt)
        return UnitOutcome.ABANDONED

    def release(self, receipt: QueueReceipt) -> Optional[QueueReceipt]:
        """Make an abandoned message visible to other consumers immediately."""
        try:
            return self.queue.update_visibility(receipt, visibility_timeout=0)
        except StorageOperationError as e:
            logger.warning(f"⚠️ Could not release message {receipt.message_id}: {e.code}")
            return None

    def process_file(self, file_path: Path) -> UnitResult:
        """
        Run announce, perform and acknowledge for one image.

        Errors end this unit only. If the announcement was made, its message
        stays in the queue as the record of unfinished work.
        """
        file_name = file_path.name
        logger.info(f"🖼️ Processing image {file_name}")

        try:
            receipt = self.announce(file_name)
        except StorageOperationError as e:
            log_unit_error(file_name, e)
            return UnitResult(file_name, UnitOutcome.FAILED, error=str(e))

        try:
            faces = self.perform(file_name, file_path)
            outcome = self.acknowledge(file_name, receipt)
        except Exception as e:
            log_unit_error(file_name, e)
            self._release_after_failure(receipt)
            return UnitResult(file_name, UnitOutcome.FAILED, error=str(e))

        return UnitResult(file_name, outcome, face_count=len(faces))

    def _release_after_failure(self, receipt: QueueReceipt) -> None:
        if self.release_failed_messages:
            self.release(receipt)

    def list_images(self, directory: Path) -> List[Path]:
        """
        List ``*.jpg`` files in sorted order, matching the suffix in any case.

        Raises:
            InputDirectoryNotFoundError: If ``directory`` is missing
        """
        if not directory.is_dir():
            raise InputDirectoryNotFoundError(str(directory))
        return sorted(
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix.lower() == IMAGE_SUFFIX
        )

    def process_directory(self, directory: Path) -> BatchSummary:
        """
        Process every image in ``directory`` sequentially.

        Raises:
            InputDirectoryNotFoundError: If ``directory`` is missing
        """
        summary = BatchSummary()
        images = self.list_images(directory)
        logger.info(f"📂 Found {len(images)} image(s) in {directory}")

        for file_path in images:
            summary.add(self.process_file(file_path))

        logger.info(
            f"🏁 Batch complete: {summary.acknowledged} acknowledged, "
            f"{summary.abandoned} abandoned, {summary.failed} failed"
        )
        return summary
