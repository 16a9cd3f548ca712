# =============================================================================
# Vision Regression - Vectorization Response Extractor
# =============================================================================
# Turns the body returned by the vectorizeImage endpoint into an
# EmbeddingResult.  Missing or malformed optional fields degrade to an empty
# model version / empty vector instead of raising, so that a useless answer
# from the service surfaces downstream as a 0.0 similarity and a failing
# verdict.  Only a body that is not a JSON object at all is an error.
# =============================================================================

import json
import logging
import numbers
from typing import Any

import numpy as np

from shared.schemas import EmbeddingResult, RawResponse
from vision.errors import ParseError

logger = logging.getLogger(__name__)

VECTOR_FIELD = "vector"
MODEL_VERSION_FIELD = "modelVersion"


def _is_number(value: Any) -> bool:
    # bool is an int subclass but JSON true/false is not a vector component
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def parse_body(body: bytes) -> dict:
    """
    Decode a response body into a JSON object.

    Args:
        body: Raw response bytes.

    Returns:
        The decoded top-level object.

    Raises:
        ParseError: If the body is not valid JSON or not a JSON object.
    """
    try:
        document = json.loads(body)
    except ValueError as exc:
        # JSONDecodeError, UnicodeDecodeError and oversized integer literals
        raise ParseError(
            f"Vision service response is not valid JSON: {exc}",
            body=body[:200].decode("utf-8", errors="replace"),
        ) from exc

    if not isinstance(document, dict):
        raise ParseError(
            f"Vision service response is a JSON {type(document).__name__}, expected an object",
            body=body[:200].decode("utf-8", errors="replace"),
        )
    return document


def extract_vector(document: dict) -> np.ndarray:
    """Return the ``vector`` field as float32, or an empty array if unusable."""
    raw_vector = document.get(VECTOR_FIELD)
    if isinstance(raw_vector, list) and all(_is_number(v) for v in raw_vector):
        try:
            return np.asarray(raw_vector, dtype=np.float32)
        except (OverflowError, ValueError):
            logger.warning(
                "Response field '%s' holds numbers outside float range; using an empty vector",
                VECTOR_FIELD,
            )
            return np.empty(0, dtype=np.float32)

    if raw_vector is None:
        logger.warning("Response has no '%s' field; using an empty vector", VECTOR_FIELD)
    else:
        logger.warning(
            "Response field '%s' is not an array of numbers (%s); using an empty vector",
            VECTOR_FIELD, type(raw_vector).__name__,
        )
    return np.empty(0, dtype=np.float32)


def extract_model_version(document: dict) -> str:
    """Return the ``modelVersion`` field, or "" if absent or not a string."""
    model_version = document.get(MODEL_VERSION_FIELD)
    if isinstance(model_version, str):
        return model_version
    logger.warning("Response has no usable '%s' field", MODEL_VERSION_FIELD)
    return ""


def extract(raw: RawResponse) -> EmbeddingResult:
    """
    Extract the model version and embedding vector from a vectorization response.

    Args:
        raw: The (status, body) pair returned by VisionClient.vectorize.

    Returns:
        EmbeddingResult; fields the service omitted are "" / empty.

    Raises:
        ParseError: If the body is not a JSON object.
    """
    document = parse_body(raw.body)
    result = EmbeddingResult(
        model_version=extract_model_version(document),
        vector=extract_vector(document),
    )
    logger.debug(
        "Extracted embedding (model=%s, dim=%d)", result.model_version or "?", result.dimension
    )
    return result
