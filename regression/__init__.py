# =============================================================================
# Vision Regression - Regression Runner Package
# =============================================================================
# This package contains the run-level components: the evaluator that turns
# two screenshots into a pass/fail verdict, the browser capture that produces
# the candidate screenshot, the archiver and the command-line entry point.
# =============================================================================
