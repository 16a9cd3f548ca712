# =============================================================================
# Vision Regression - Vectorization HTTP Client
# =============================================================================
# Provides the VisionClient class responsible for sending the raw bytes of an
# image file to the Computer Vision "vectorizeImage" endpoint and returning
# the transport-level response.  The body is not interpreted here; parsing
# lives in vision.extract.
# =============================================================================

import logging
from pathlib import Path
from typing import Optional, Union

import requests

from shared.schemas import RawResponse
from vision.errors import TransportError, VisionTimeoutError

logger = logging.getLogger(__name__)

SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"


class VisionClient:
    """
    HTTP client for the image vectorization endpoint.

    Reads an image file, POSTs its bytes as application/octet-stream and
    returns the (status, body) pair.  One request per call, no retries.

    Args:
        endpoint:   Base URL of the Computer Vision resource.
        api_key:    Subscription key sent in the Ocp-Apim-Subscription-Key header.
        model_path: Path and query selecting the model and API version.
        timeout:    Seconds to wait for the service before giving up.
        session:    Optional pre-built requests.Session (mainly for tests).
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        model_path: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self._endpoint = endpoint.rstrip("/")
        self._model_path = model_path.lstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({SUBSCRIPTION_KEY_HEADER: api_key})

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "VisionClient":
        """Build a client from the vision fields of a Config."""
        return cls(
            endpoint=config.vision_endpoint,
            api_key=config.vision_api_key,
            model_path=config.vision_model_path,
            timeout=config.request_timeout_seconds,
            session=session,
        )

    @property
    def url(self) -> str:
        return f"{self._endpoint}/{self._model_path}"

    def vectorize(self, image_path: Union[str, Path]) -> RawResponse:
        """
        Send an image file to the vectorization endpoint.

        Args:
            image_path: Path to an existing image file.  Its content and
                        format are not checked.

        Returns:
            RawResponse with the HTTP status and undecoded body.

        Raises:
            VisionTimeoutError: The request exceeded the configured timeout.
            TransportError:     Network failure or non-2xx status.
        """
        image_data = Path(image_path).read_bytes()
        logger.debug(
            "Vectorizing %s (%d bytes) via %s", image_path, len(image_data), self.url
        )

        try:
            response = self._session.post(
                self.url,
                data=image_data,
                headers={"Content-Type": "application/octet-stream"},
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as exc:
            logger.error(
                "Vectorization of %s timed out after %.1fs", image_path, self._timeout
            )
            raise VisionTimeoutError(
                f"Vision service did not answer within {self._timeout}s",
                detail=str(exc),
            ) from exc
        except requests.exceptions.RequestException as exc:
            logger.error("Vectorization request for %s failed: %s", image_path, exc)
            raise TransportError(
                f"Request to vision service failed: {type(exc).__name__}",
                detail=str(exc),
            ) from exc

        if not 200 <= response.status_code < 300:
            logger.error(
                "Vision service returned HTTP %d for %s: %s",
                response.status_code, image_path, response.text[:200],
            )
            raise TransportError(
                f"Vision service returned error: {response.status_code}",
                status_code=response.status_code,
                detail=response.text,
            )

        logger.info(
            "Vectorized %s → HTTP %d (%d KB payload)",
            image_path, response.status_code, len(image_data) // 1024,
        )
        return RawResponse(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "VisionClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
