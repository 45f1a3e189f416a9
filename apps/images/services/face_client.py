"""
Azure Face API client for age estimation.

Handles HTTP POST requests to the Face detect endpoint with retry logic for
transient connection failures.
"""

import logging
from typing import List, Optional, Sequence

import requests
from django.conf import settings
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from apps.core.exceptions import FaceAPIError

from ..types import DetectedFace

logger = logging.getLogger(__name__)

DETECT_PATH = "/face/v1.0/detect"


class FaceClient:
    """
    Detect faces and their attributes in an image.

    Connection errors and timeouts are retried with exponential backoff.
    Error responses from the service are not retried; they raise FaceAPIError.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        subscription_key: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """Initialize with endpoint and key from settings."""
        self.endpoint = (endpoint or getattr(settings, "FACE_API_ENDPOINT", "")).rstrip("/")
        self.subscription_key = subscription_key or getattr(settings, "FACE_SUBSCRIPTION_KEY", "")
        self.timeout = timeout or getattr(settings, "FACE_API_TIMEOUT", 30)

        if not self.endpoint or not self.subscription_key:
            logger.warning(
                "⚠️ FACE_API_ENDPOINT or FACE_SUBSCRIPTION_KEY not configured - face detection will fail"
            )

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def detect(self, image: bytes, attributes: Sequence[str] = ("age",)) -> List[DetectedFace]:
        """
        Detect faces in an image.

        Args:
            image: Raw image bytes (JPEG)
            attributes: Face attributes to request

        Returns:
            Detected faces in the order returned by the service

        Raises:
            FaceAPIError: If the service returns an error response
            ValueError: If the endpoint or key is not configured
            requests.RequestException: If all retries fail
        """
        if not self.endpoint or not self.subscription_key:
            raise ValueError(
                "FACE_API_ENDPOINT and FACE_SUBSCRIPTION_KEY must be configured"
            )

        url = f"{self.endpoint}{DETECT_PATH}"
        params = {
            "returnFaceId": "false",
            "returnFaceLandmarks": "false",
            "returnFaceAttributes": ",".join(attributes),
        }

        logger.debug(f"🔍 Calling Face API: {url} ({len(image)} bytes)")

        response = requests.post(
            url,
            params=params,
            data=image,
            timeout=self.timeout,
            headers={
                "Content-Type": "application/octet-stream",
                "Ocp-Apim-Subscription-Key": self.subscription_key,
            },
        )

        if not response.ok:
            raise self._error_from_response(response)

        faces = [
            DetectedFace(age=item.get("faceAttributes", {}).get("age", 0.0))
            for item in response.json()
        ]
        logger.debug(f"✅ Face API returned {len(faces)} face(s)")
        return faces

    @staticmethod
    def _error_from_response(response: requests.Response) -> FaceAPIError:
        """Parse the ``{"error": {"code", "message"}}`` payload of a failed call."""
        code = None
        message = None
        try:
            error = response.json().get("error", {})
            code = error.get("code")
            message = error.get("message")
        except ValueError:
            message = response.text

        logger.error(f"❌ Face API HTTP error {response.status_code}: {code} {message}")
        return FaceAPIError(
            detail=message or f"HTTP {response.status_code}",
            code=code or str(response.status_code),
            status_code=response.status_code,
        )
