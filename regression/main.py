# =============================================================================
# Vision Regression - Run Orchestrator
# =============================================================================
# Entry point for a visual regression run.  Captures the page under test,
# compares the screenshot with the stored baseline through image embeddings
# from the vision service, reports the verdict and archives the snapshots.
#
# Flow:
#   1. Capture a full-page screenshot (PNG + JPEG) with headless Chromium
#   2. Vectorize baseline and candidate through the vision service
#   3. Cosine similarity of the two embeddings against the tolerance
#   4. Archive the snapshots together with verdict.json
#
# Exit codes: 0 pass, 1 fail, 2 inconclusive (service unreachable or
# unparseable answer; nothing is archived).
# =============================================================================

import argparse
import logging
import os
import sys
from typing import List, Optional

from config import get_config
from regression.archive import archive_snapshots
from regression.capture import PageCapture
from regression.evaluator import RegressionEvaluator
from shared.schemas import Verdict
from vision.client import VisionClient
from vision.errors import ParseError, TransportError, VisionTimeoutError

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_INCONCLUSIVE = 2


class RegressionRun:
    """
    Orchestrator that ties together page capture, vectorization, scoring
    and archiving for one run.

    Args:
        config:  The Config instance with all tunable parameters.
        capture: Optional PageCapture override.
        client:  Optional VisionClient override.
    """

    def __init__(
        self,
        config,
        capture: Optional[PageCapture] = None,
        client: Optional[VisionClient] = None,
    ):
        self._config = config
        self._capture = capture or PageCapture.from_config(config)
        self._client = client or VisionClient.from_config(config)
        self._evaluator = RegressionEvaluator(
            client=self._client,
            tolerance=config.tolerance,
            concurrent=config.concurrent_vectorization,
        )

    @property
    def evaluator(self) -> RegressionEvaluator:
        return self._evaluator

    def print_banner(self) -> None:
        print("\n" + "=" * 60)
        print("  Vision Regression: embedding similarity check")
        print("=" * 60)
        print(f"  Page        : {self._config.base_url}")
        print(f"  Baseline    : {self._config.baseline_path}")
        print(f"  Candidate   : {self._config.candidate_path}")
        print(f"  Endpoint    : {self._config.vision_endpoint}")
        print(f"  Model       : {self._config.vision_model_path}")
        print(f"  Tolerance   : {self._config.tolerance}")
        print("=" * 60 + "\n")

    def run(self, skip_capture: bool = False) -> Verdict:
        """
        Execute one full regression run.

        Args:
            skip_capture: Use an existing candidate screenshot instead of
                          capturing the page.

        Returns:
            The verdict of the run.

        Raises:
            TransportError: The vision service could not be reached.
            ParseError:     The vision service answer was not a JSON object.
        """
        config = self._config
        snapshots = [config.candidate_path]

        if not skip_capture:
            self._evaluator.begin_capture()
            self._capture.capture(
                config.base_url, config.candidate_path, config.candidate_jpeg_path
            )
            snapshots.append(config.candidate_jpeg_path)

        verdict = self._evaluator.evaluate(config.baseline_path, config.candidate_path)

        print(f"Cosine similarity between baseline and actual image: {verdict.score}")
        print(f"Accepted similarity is at a value greater than or equal to: {verdict.tolerance}")
        print(f"Result: {'PASS' if verdict.passed else 'FAIL'}: {verdict.summary()}")

        # an externally supplied candidate belongs to its producer; copy it only
        folder = archive_snapshots(
            snapshots, config.archive_dir, verdict=verdict, move=not skip_capture
        )
        logger.info("Run archived to %s", folder)
        return verdict

    def close(self) -> None:
        self._client.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vision Regression: compare a page screenshot with its baseline",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--url", type=str, default=None, help="Page to capture (overrides config)")
    parser.add_argument("--baseline", type=str, default=None, help="Baseline image path")
    parser.add_argument("--candidate", type=str, default=None, help="Candidate image path")
    parser.add_argument(
        "--tolerance", type=float, default=None,
        help="Minimum cosine similarity for a pass, in [0, 1]",
    )
    parser.add_argument(
        "--skip-capture", action="store_true",
        help="Compare an existing candidate image instead of capturing the page",
    )
    parser.add_argument(
        "--sequential", action="store_true",
        help="Vectorize baseline and candidate one after the other",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for a regression run."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = get_config()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_INCONCLUSIVE

    if args.url is not None:
        config.base_url = args.url
    if args.tolerance is not None:
        config.tolerance = args.tolerance
    if args.sequential:
        config.concurrent_vectorization = False
    config.refresh_paths()
    if args.baseline is not None:
        config.baseline_path = args.baseline
    if args.candidate is not None:
        config.candidate_path = args.candidate
        config.candidate_jpeg_path = os.path.splitext(args.candidate)[0] + ".jpg"

    try:
        run = RegressionRun(config)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_INCONCLUSIVE

    run.print_banner()
    try:
        verdict = run.run(skip_capture=args.skip_capture)
    except VisionTimeoutError as exc:
        logger.error("Inconclusive: vision service timed out (%s)", exc)
        return EXIT_INCONCLUSIVE
    except TransportError as exc:
        logger.error("Inconclusive: transport failure (status=%s): %s", exc.status_code, exc)
        return EXIT_INCONCLUSIVE
    except ParseError as exc:
        logger.error("Inconclusive: unparseable vision response: %s", exc)
        return EXIT_INCONCLUSIVE
    finally:
        run.close()

    return EXIT_PASS if verdict.passed else EXIT_FAIL


if __name__ == "__main__":
    sys.exit(main())
