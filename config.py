# =============================================================================
# Vision Regression - Centralized Configuration
# =============================================================================
# Provides a single Config dataclass containing all tunable parameters for
# the capture, vectorization, evaluation and archiving steps. Parameters are
# overridable via environment variables with the VISREG_ prefix
# (e.g., VISREG_TOLERANCE=0.95).
# =============================================================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Project root directory (where this file lives)
_PROJECT_ROOT = str(Path(__file__).parent.resolve())

DEFAULT_MODEL_PATH = (
    "computervision/retrieval:vectorizeImage"
    "?model-version=2023-04-15&api-version=2024-02-01"
)


def _parse_bool(value: str) -> bool:
    """
    Interpret an environment string as a boolean flag.

    Args:
        value: Raw string such as "1", "true", "no".

    Returns:
        True for "1", "true", "yes", "on" (case-insensitive), else False.
    """
    return value.strip().lower() in ("1", "true", "yes", "on")


def validate_tolerance(tolerance: float) -> float:
    """
    Ensure a similarity tolerance lies in [0.0, 1.0].

    Args:
        tolerance: Candidate tolerance value.

    Returns:
        The tolerance as a float.

    Raises:
        ValueError: If the value is outside the closed unit interval.
    """
    tolerance = float(tolerance)
    if not 0.0 <= tolerance <= 1.0:
        raise ValueError(f"Tolerance must be within [0.0, 1.0], got {tolerance}")
    return tolerance


@dataclass
class Config:
    """
    Centralized configuration for the Vision Regression system.

    All fields can be overridden via environment variables prefixed with VISREG_.
    """

    # -- Vision Service --
    vision_endpoint: str = "https://<yourCustomResourceName>.cognitiveservices.azure.com/"
    vision_api_key: str = ""
    vision_model_path: str = DEFAULT_MODEL_PATH
    request_timeout_seconds: float = 30.0

    # -- Decision --
    tolerance: float = 0.98
    concurrent_vectorization: bool = True

    # -- Page Capture --
    base_url: str = "https://blueridgegateways.com"
    viewport_width: int = 1280
    viewport_height: int = 720
    headless: bool = True
    jpeg_quality: int = 90

    # -- Files --
    baseline_dir: str = field(
        default_factory=lambda: os.path.join(_PROJECT_ROOT, "baselines")
    )
    snapshot_dir: str = field(
        default_factory=lambda: os.path.join(_PROJECT_ROOT, "snapshots")
    )
    archive_dir: str = field(
        default_factory=lambda: os.path.join(_PROJECT_ROOT, "snapshots", "archive")
    )
    baseline_image_name: str = "baselineImage.png"
    candidate_image_name: str = "homepage.png"

    # -- Derived (computed post-init) --
    baseline_path: str = field(init=False)
    candidate_path: str = field(init=False)
    candidate_jpeg_path: str = field(init=False)

    def __post_init__(self):
        """Apply environment variable overrides and compute derived fields."""
        self._apply_env_overrides()
        self.tolerance = validate_tolerance(self.tolerance)
        self.refresh_paths()

    def refresh_paths(self) -> None:
        """Recompute the derived image paths from the directory/name fields."""
        self.baseline_path = os.path.join(self.baseline_dir, self.baseline_image_name)
        self.candidate_path = os.path.join(self.snapshot_dir, self.candidate_image_name)
        stem, _ = os.path.splitext(self.candidate_path)
        self.candidate_jpeg_path = f"{stem}.jpg"

    def _apply_env_overrides(self):
        """
        Override config fields from environment variables.

        Looks for VISREG_<FIELD_NAME_UPPERCASE> environment variables and
        applies them with appropriate type conversion.
        """
        field_types = {
            "vision_endpoint": str,
            "vision_api_key": str,
            "vision_model_path": str,
            "request_timeout_seconds": float,
            "tolerance": float,
            "concurrent_vectorization": _parse_bool,
            "base_url": str,
            "viewport_width": int,
            "viewport_height": int,
            "headless": _parse_bool,
            "jpeg_quality": int,
            "baseline_dir": str,
            "snapshot_dir": str,
            "archive_dir": str,
            "baseline_image_name": str,
            "candidate_image_name": str,
        }
        for field_name, field_type in field_types.items():
            env_key = f"VISREG_{field_name.upper()}"
            env_value = os.environ.get(env_key)
            if env_value is not None:
                setattr(self, field_name, field_type(env_value))


# ---------------------------------------------------------------------------
# Singleton accessor
# ---------------------------------------------------------------------------
_config_instance: Optional[Config] = None


def get_config() -> Config:
    """
    Return the singleton Config instance, creating it on first call.

    Returns:
        Config: The global configuration object.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance
