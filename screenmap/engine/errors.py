"""Error kinds raised by the screen reconstruction engine.

Root-level structural failures abort a run and surface as a single
``ScreenMapError``. Per-component problems never raise: malformed geometry
degrades to zeros and asset failures are skipped.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ScreenMapError(Exception):
    """Base class for engine failures surfaced to callers."""

    kind = "screen_map_error"

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"error": self.kind, "message": self.message}
        if self.details:
            out["details"] = self.details
        return out


class InvalidDocumentError(ScreenMapError):
    """Raised when the payload has no usable document root."""

    kind = "invalid_document"


class UnresolvedReferenceError(ScreenMapError):
    """Raised when a requested sub-node id is absent from the fetched tree."""

    kind = "unresolved_reference"


class AssetFetchError(ScreenMapError):
    """Raised by asset collaborators; always caught and skipped by the engine."""

    kind = "asset_fetch_failure"
