# =============================================================================
# Vision Regression - Similarity Engine
# =============================================================================
# Cosine similarity between two embedding vectors.  Degenerate inputs
# (different lengths, empty vectors, zero-norm vectors) score 0.0 rather than
# raising, so an unusable service answer shows up as "no similarity".
# =============================================================================

from typing import Sequence, Union

import numpy as np

VectorLike = Union[np.ndarray, Sequence[float]]


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Compute the cosine similarity of two vectors.

    Products and sums are accumulated in float64 regardless of the input
    precision.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        dot(a, b) / (|a| * |b|), or 0.0 for degenerate inputs.
    """
    vec_a = np.asarray(a, dtype=np.float64).ravel()
    vec_b = np.asarray(b, dtype=np.float64).ravel()

    if vec_a.size != vec_b.size or vec_a.size == 0:
        return 0.0

    denominator = np.linalg.norm(vec_a) * np.linalg.norm(vec_b)
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0

    similarity = float(np.dot(vec_a, vec_b) / denominator)
    if not np.isfinite(similarity):
        return 0.0
    # rounding can push |v|·|v| / (|v|·|v|) a hair outside [-1, 1]
    return max(-1.0, min(1.0, similarity))
