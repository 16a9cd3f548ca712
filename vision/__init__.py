# =============================================================================
# Vision Regression - Vision Service Package
# =============================================================================
# This package contains the components that talk to the external image
# vectorization service and turn its answers into comparable embeddings:
# the HTTP client, the response extractor and the similarity engine.
# =============================================================================
