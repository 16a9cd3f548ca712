# =============================================================================
# Vision Regression - Regression Evaluator
# =============================================================================
# Provides the RegressionEvaluator class that vectorizes a baseline and a
# candidate screenshot, scores them with cosine similarity and decides
# pass/fail against a single tolerance.
#
# Flow:
#   1. Vectorize baseline and candidate (concurrently by default)
#   2. Extract (model version, vector) from each response
#   3. Cosine similarity of the two vectors
#   4. Verdict: pass iff score >= tolerance
#
# Transport and parse failures abort the run with no verdict.  Empty or
# mismatched vectors are not failures of the run: they score 0.0 and produce
# a failing verdict.
# =============================================================================

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Tuple, Union

from config import validate_tolerance
from shared.schemas import EmbeddingResult, RunState, Verdict
from vision.client import VisionClient
from vision.extract import extract
from vision.similarity import cosine_similarity

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class RegressionEvaluator:
    """
    Compare a candidate screenshot with its baseline through image embeddings.

    Args:
        client:     VisionClient used for both vectorization calls.
        tolerance:  Minimum similarity for a pass, in [0.0, 1.0].
        concurrent: Issue the two vectorization calls in parallel threads.
    """

    def __init__(self, client: VisionClient, tolerance: float, concurrent: bool = True):
        self._client = client
        self._tolerance = validate_tolerance(tolerance)
        self._concurrent = concurrent
        self._state = RunState.IDLE

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def begin_capture(self) -> None:
        """Record that the external screenshot capture for this run has started."""
        self._transition(RunState.CAPTURING)

    def _transition(self, state: RunState) -> None:
        logger.debug("Evaluator state %s → %s", self._state.value, state.value)
        self._state = state

    def _embed(self, image_path: PathLike) -> EmbeddingResult:
        """Vectorize one image and extract its embedding."""
        return extract(self._client.vectorize(image_path))

    def _embed_sequential(
        self, baseline_path: PathLike, candidate_path: PathLike
    ) -> Tuple[EmbeddingResult, EmbeddingResult]:
        self._transition(RunState.VECTORIZING_BASELINE)
        baseline = self._embed(baseline_path)
        self._transition(RunState.VECTORIZING_CANDIDATE)
        candidate = self._embed(candidate_path)
        return baseline, candidate

    def _embed_concurrent(
        self, baseline_path: PathLike, candidate_path: PathLike
    ) -> Tuple[EmbeddingResult, EmbeddingResult]:
        """
        Vectorize both images on two worker threads and join the results.

        The first failure cancels the other call if it has not started yet
        and is re-raised; no partial result is returned.
        """
        self._transition(RunState.VECTORIZING_BASELINE)
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="vectorize") as pool:
            baseline_future = pool.submit(self._embed, baseline_path)
            self._transition(RunState.VECTORIZING_CANDIDATE)
            candidate_future = pool.submit(self._embed, candidate_path)

            done, pending = wait(
                [baseline_future, candidate_future], return_when=FIRST_EXCEPTION
            )
            for future in done:
                if future.exception() is not None:
                    for other in pending:
                        other.cancel()
                    raise future.exception()

            return baseline_future.result(), candidate_future.result()

    def evaluate(self, baseline_path: PathLike, candidate_path: PathLike) -> Verdict:
        """
        Run one baseline-versus-candidate comparison.

        Args:
            baseline_path:  Reference screenshot.
            candidate_path: Freshly captured screenshot under test.

        Returns:
            Verdict with the score, the tolerance and pass/fail.

        Raises:
            TransportError: A vectorization call failed or timed out.
            ParseError:     The service answered with something that is not
                            a JSON object.
        """
        logger.info(
            "Evaluating %s against baseline %s (tolerance=%.4f)",
            candidate_path, baseline_path, self._tolerance,
        )
        try:
            if self._concurrent:
                baseline, candidate = self._embed_concurrent(baseline_path, candidate_path)
            else:
                baseline, candidate = self._embed_sequential(baseline_path, candidate_path)
        except Exception:
            self._transition(RunState.ABORTED)
            logger.exception("Evaluation aborted; run is inconclusive")
            raise

        self._transition(RunState.SCORING)
        verdict = self.decide(baseline, candidate, baseline_path, candidate_path)
        self._transition(RunState.PASSED if verdict.passed else RunState.FAILED)
        return verdict

    def decide(
        self,
        baseline: EmbeddingResult,
        candidate: EmbeddingResult,
        baseline_path: PathLike = "",
        candidate_path: PathLike = "",
    ) -> Verdict:
        """
        Score two embeddings and apply the tolerance.

        Args:
            baseline:       Embedding of the reference image.
            candidate:      Embedding of the image under test.
            baseline_path:  Reported in the verdict.
            candidate_path: Reported in the verdict.

        Returns:
            Verdict for this pair.
        """
        score = cosine_similarity(baseline.vector, candidate.vector)
        passed = score >= self._tolerance

        degenerate = (
            baseline.is_empty
            or candidate.is_empty
            or baseline.dimension != candidate.dimension
        )
        if degenerate:
            logger.warning(
                "Degenerate embeddings (baseline dim=%d, candidate dim=%d); similarity is %.1f",
                baseline.dimension, candidate.dimension, score,
            )

        if passed:
            reason = "within_tolerance"
        elif degenerate:
            reason = "degenerate_vectors"
        else:
            reason = "below_tolerance"

        verdict = Verdict(
            passed=passed,
            score=score,
            tolerance=self._tolerance,
            reason=reason,
            baseline_model_version=baseline.model_version,
            candidate_model_version=candidate.model_version,
            baseline_path=str(baseline_path),
            candidate_path=str(candidate_path),
        )
        if verdict.model_version_mismatch:
            logger.warning(
                "Model version mismatch: baseline=%s candidate=%s; scores are not comparable",
                baseline.model_version, candidate.model_version,
            )

        logger.info("%s → %s", verdict.summary(), "PASS" if passed else "FAIL")
        return verdict
