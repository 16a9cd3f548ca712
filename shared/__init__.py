# =============================================================================
# Vision Regression - Shared Package
# =============================================================================
# Data contracts shared by the vision client package and the regression
# runner package.
# =============================================================================
