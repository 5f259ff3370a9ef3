"""Document-to-screen reconstruction engine.

Leaves first:
- nodes: typed read-only view of Figma document nodes
- classifier: node → Category (name rules, then structural fallback)
- extractor: depth-first candidate selection via an emit/descend policy
- dedup: nested candidate and keyboard-key removal
- geometry: screen-relative positions and alignment
- sections / categorizer: vertical sections and category map
- transformers: per-category cosmetic properties
- assembler: ``build_screen`` entry point
- assets: post-normalization asset enrichment
"""

from .assembler import ScreenDescriptor, ScreenResult, build_screen, resolve_document
from .assets import attach_assets, attach_assets_to_result
from .classifier import Category, classify_node
from .errors import (
    AssetFetchError,
    InvalidDocumentError,
    ScreenMapError,
    UnresolvedReferenceError,
)
from .nodes import BoundingBox, DocumentNode
from .transformers import build_transformers

__all__ = [
    "AssetFetchError",
    "BoundingBox",
    "Category",
    "DocumentNode",
    "InvalidDocumentError",
    "ScreenDescriptor",
    "ScreenMapError",
    "ScreenResult",
    "UnresolvedReferenceError",
    "attach_assets",
    "attach_assets_to_result",
    "build_screen",
    "build_transformers",
    "classify_node",
    "resolve_document",
]
