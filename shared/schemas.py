# =============================================================================
# Vision Regression - Shared Data Contracts
# =============================================================================
# Value types passed between the vision client, the response extractor, the
# similarity engine and the regression evaluator.
#
# RawResponse abstracts the HTTP transport as a (status, body) pair so that
# response parsing never depends on a particular HTTP library.  Verdict is a
# pydantic model because it leaves the process: it is printed as a report and
# archived as JSON alongside the screenshots of the run.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

import numpy as np
from pydantic import BaseModel, Field


class RawResponse(NamedTuple):
    """
    Transport-level response from the vectorization endpoint.

    Attributes:
        status_code: HTTP status code.
        body:        Undecoded response body bytes.
    """

    status_code: int
    body: bytes


def _empty_vector() -> np.ndarray:
    return np.empty(0, dtype=np.float32)


@dataclass(frozen=True, eq=False)
class EmbeddingResult:
    """
    Normalized extraction of a vectorization response.

    Attributes:
        model_version: Model version reported by the service, "" when absent.
        vector:        float32 embedding, empty when absent or malformed.
    """

    model_version: str = ""
    vector: np.ndarray = field(default_factory=_empty_vector)

    def __post_init__(self):
        vector = np.array(self.vector, dtype=np.float32)
        vector.setflags(write=False)
        object.__setattr__(self, "vector", vector)

    @property
    def is_empty(self) -> bool:
        return self.vector.size == 0

    @property
    def dimension(self) -> int:
        return int(self.vector.size)


class RunState(str, Enum):
    """Lifecycle of a single regression evaluation."""

    IDLE = "idle"
    CAPTURING = "capturing"
    VECTORIZING_BASELINE = "vectorizing_baseline"
    VECTORIZING_CANDIDATE = "vectorizing_candidate"
    SCORING = "scoring"
    PASSED = "passed"
    FAILED = "failed"
    ABORTED = "aborted"


class Verdict(BaseModel):
    """
    Outcome of comparing a candidate screenshot with its baseline.

    Attributes:
        passed:                   True iff score >= tolerance.
        score:                    Cosine similarity of the two embeddings.
        tolerance:                Threshold the score was compared against.
        reason:                   "within_tolerance", "below_tolerance" or
                                  "degenerate_vectors".
        baseline_model_version:   Model version reported for the baseline.
        candidate_model_version:  Model version reported for the candidate.
        baseline_path:            Baseline image that was vectorized.
        candidate_path:           Candidate image that was vectorized.
    """

    passed: bool
    score: float
    tolerance: float = Field(..., ge=0.0, le=1.0)
    reason: str
    baseline_model_version: str = ""
    candidate_model_version: str = ""
    baseline_path: str = ""
    candidate_path: str = ""

    @property
    def model_version_mismatch(self) -> bool:
        """True when both model versions are known and differ."""
        return bool(
            self.baseline_model_version
            and self.candidate_model_version
            and self.baseline_model_version != self.candidate_model_version
        )

    def summary(self) -> str:
        if self.passed:
            return (
                f"Cosine similarity {self.score:.6f} meets tolerance {self.tolerance}."
            )
        if self.reason == "degenerate_vectors":
            return (
                f"Cosine similarity {self.score:.6f} below tolerance {self.tolerance}: "
                "the vision service returned no comparable vectors."
            )
        return f"Cosine similarity {self.score:.6f} was below tolerance {self.tolerance}."
