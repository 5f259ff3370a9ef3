"""Engine runtime settings: tunable parameters for screen reconstruction.

All values read from environment variables with defaults. Import from
here instead of hardcoding.

Infrastructure config (API host, tokens, asset paths) stays in
screenmap/config.py.
"""

from __future__ import annotations

import os


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _str(key: str, default: str) -> str:
    return os.getenv(key, default)


# =====================================================================
# Geometry
# =====================================================================

# Screen size used when the document root has no bounding box (iPhone 14)
DEFAULT_SCREEN_WIDTH = _float("DEFAULT_SCREEN_WIDTH", 390.0)
DEFAULT_SCREEN_HEIGHT = _float("DEFAULT_SCREEN_HEIGHT", 844.0)

# Max |leftMargin - rightMargin| (px) still treated as horizontally centered
ALIGNMENT_TOLERANCE = _float("ALIGNMENT_TOLERANCE", 10.0)


# =====================================================================
# Sections
# =====================================================================

# Vertical gap (px) between consecutive components that opens a new section
SECTION_GAP_THRESHOLD = _float("SECTION_GAP_THRESHOLD", 40.0)


# =====================================================================
# Assets / HTTP
# =====================================================================

# Max parallel asset downloads per descriptor
ASSET_FETCH_CONCURRENCY = _int("ASSET_FETCH_CONCURRENCY", 4)

FIGMA_HTTP_TIMEOUT = _float("FIGMA_HTTP_TIMEOUT", 60.0)

# Image export options for node renders
ASSET_IMAGE_FORMAT = _str("ASSET_IMAGE_FORMAT", "png")
ASSET_IMAGE_SCALE = _int("ASSET_IMAGE_SCALE", 2)


# =====================================================================
# Output
# =====================================================================

DESCRIPTOR_VERSION = _str("DESCRIPTOR_VERSION", "1.0")
