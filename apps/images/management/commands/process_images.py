"""
Publish every image in the input directory using pop receipt coordination.

Usage:
    python manage.py process_images
"""

import logging
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.core.exceptions import InputDirectoryNotFoundError, ResourceSetupError
from apps.images.processor import ImageProcessor

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = (
        "Upload each image to blob storage and its estimated ages to table storage, "
        "deleting the queue message with its pop receipt once both are confirmed"
    )

    def handle(self, *args, **options):
        directory = Path(getattr(settings, "POPRECEIPT_INPUT_DIRECTORY", "testfolder"))

        self.stdout.write("Azure Storage Queue sample demonstrating pop receipt functionality\n")

        processor = ImageProcessor()

        try:
            processor.setup()
        except (ResourceSetupError, ValueError) as e:
            raise CommandError(f"Resource setup failed: {e}") from e

        try:
            summary = processor.process_directory(directory)
        except InputDirectoryNotFoundError as e:
            logger.error(f"❌ {e}")
            logger.error(
                f'Please make sure that the folder "{directory}" (with images) is present '
                "in the current directory where the sample is running"
            )
            return
        finally:
            if getattr(settings, "POPRECEIPT_CLEANUP_RESOURCES", False):
                processor.cleanup()

        self.stdout.write(
            self.style.SUCCESS(
                f"Processed {len(summary.results)} image(s): "
                f"{summary.acknowledged} acknowledged, {summary.abandoned} abandoned, "
                f"{summary.failed} failed"
            )
        )
        for file_name in summary.pending_file_names:
            self.stdout.write(f"  pending reconciliation: {file_name}")
