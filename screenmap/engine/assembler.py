"""Screen descriptor assembly: the engine's entry point.

Pipeline:
    payload → resolve_document → DocumentNode tree
      → extract_candidates → deduplicate → normalize_candidates
      → {group_into_sections, categorize_by_type} → ScreenDescriptor

``build_screen`` is synchronous and pure apart from logging; every call
produces a fresh, independent result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from screenmap import settings

from .categorizer import categorize_by_type
from .dedup import deduplicate
from .errors import InvalidDocumentError, UnresolvedReferenceError
from .extractor import extract_candidates
from .geometry import NormalizedComponent, Size, normalize_candidates, resolve_screen_box
from .nodes import BoundingBox, DocumentNode, round_half_up
from .sections import Section, group_into_sections, order_components
from .transformers import TransformerMap, build_transformers

logger = logging.getLogger("screenmap.engine.assembler")

ScreenBounds = Union[BoundingBox, Mapping[str, Any], None]


@dataclass(frozen=True)
class ScreenDescriptor:
    name: str
    size: Size
    sections: Tuple[Section, ...] = ()
    ordered_elements: Tuple[NormalizedComponent, ...] = ()
    elements: Dict[str, Any] = field(default_factory=dict, compare=False)

    def with_components(self, updated: Mapping[str, NormalizedComponent]) -> "ScreenDescriptor":
        """Return a copy where components are swapped by id (e.g. with assets)."""
        if not updated:
            return self

        def swap(component: NormalizedComponent) -> NormalizedComponent:
            return updated.get(component.id, component)

        elements: Dict[str, Any] = {}
        for key, value in self.elements.items():
            if isinstance(value, NormalizedComponent):
                elements[key] = swap(value)
            else:
                elements[key] = [swap(c) for c in value]

        return replace(
            self,
            sections=tuple(
                replace(s, components=tuple(swap(c) for c in s.components))
                for s in self.sections
            ),
            ordered_elements=tuple(swap(c) for c in self.ordered_elements),
            elements=elements,
        )

    def to_dict(self) -> Dict[str, Any]:
        elements: Dict[str, Any] = {}
        for key, value in self.elements.items():
            if isinstance(value, NormalizedComponent):
                elements[key] = value.to_dict()
            else:
                elements[key] = [c.to_dict() for c in value]
        return {
            "name": self.name,
            "size": self.size.to_dict(),
            "layout": {
                "sections": [s.to_dict() for s in self.sections],
                "orderedElements": [c.to_dict() for c in self.ordered_elements],
            },
            "elements": elements,
        }


@dataclass(frozen=True)
class ScreenResult:
    """Descriptor plus the metadata envelope serialized by front-ends."""

    screen: ScreenDescriptor
    version: str
    timestamp: str
    source_id: Optional[str]
    components_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "timestamp": self.timestamp,
            "sourceId": self.source_id,
            "componentsCount": self.components_count,
            "screen": self.screen.to_dict(),
        }


def _normalize_node_id(node_id: str) -> str:
    # URLs carry "1-2", the API uses "1:2"
    return node_id.replace("-", ":")


def resolve_document(
    payload: Any,
    node_id: Optional[str] = None,
) -> Tuple[Mapping[str, Any], Optional[str]]:
    """Locate the document root inside a Figma API payload.

    Accepts a bare node dict, a files response (``{"document": ...}``) or a
    nodes response (``{"nodes": {id: {"document": ...}}}``).

    Returns:
        (root node dict, file name if the payload carries one)

    Raises:
        InvalidDocumentError: no usable root.
        UnresolvedReferenceError: ``node_id`` requested but absent.
    """
    if not isinstance(payload, Mapping):
        raise InvalidDocumentError("Document payload must be a JSON object")

    source_name = payload.get("name") if isinstance(payload.get("name"), str) else None
    root: Optional[Mapping[str, Any]] = None

    nodes_map = payload.get("nodes")
    if isinstance(nodes_map, Mapping):
        if node_id:
            entry = nodes_map.get(node_id) or nodes_map.get(_normalize_node_id(node_id))
            if not isinstance(entry, Mapping):
                raise UnresolvedReferenceError(
                    f"Node '{node_id}' not found in document",
                    details={"node_id": node_id, "available": list(nodes_map.keys())},
                )
        else:
            entry = next((v for v in nodes_map.values() if isinstance(v, Mapping)), None)
        if entry is not None and isinstance(entry.get("document"), Mapping):
            root = entry["document"]
    elif isinstance(payload.get("document"), Mapping):
        root = payload["document"]
    elif "type" in payload or "children" in payload:
        root = payload

    if root is None:
        raise InvalidDocumentError("No document root found in payload")

    if node_id and not isinstance(nodes_map, Mapping):
        tree = DocumentNode.from_dict(root)
        match = tree.find(node_id) or tree.find(_normalize_node_id(node_id))
        if match is None:
            raise UnresolvedReferenceError(
                f"Node '{node_id}' not found in document",
                details={"node_id": node_id},
            )
        root = match.raw

    return root, source_name


def _coerce_bounds(bounds: ScreenBounds) -> Optional[BoundingBox]:
    if bounds is None or isinstance(bounds, BoundingBox):
        return bounds
    return BoundingBox.from_dict(bounds)


def assemble_descriptor(
    name: str,
    screen: BoundingBox,
    components: Sequence[NormalizedComponent],
    gap_threshold: Optional[float] = None,
) -> ScreenDescriptor:
    ordered = order_components(components)
    return ScreenDescriptor(
        name=name,
        size=Size(width=round_half_up(screen.width), height=round_half_up(screen.height)),
        sections=tuple(group_into_sections(ordered, gap_threshold)),
        ordered_elements=tuple(ordered),
        elements=categorize_by_type(ordered),
    )


def build_screen(
    document: Any,
    screen_bounds: ScreenBounds = None,
    *,
    source_id: Optional[str] = None,
    node_id: Optional[str] = None,
    transformers: Optional[TransformerMap] = None,
    gap_threshold: Optional[float] = None,
    alignment_tolerance: Optional[float] = None,
) -> ScreenResult:
    """Convert a design document into a screen descriptor.

    Args:
        document: Figma payload (bare node, files or nodes response).
        screen_bounds: Optional override of the screen frame.
        source_id: Identifier echoed in the metadata envelope (file key).
        node_id: Optional sub-node to use as the screen root.
        transformers: Category → leaf transformer mapping; built once when omitted.
        gap_threshold: Section gap override (px).
        alignment_tolerance: Centering tolerance override (px).

    Raises:
        InvalidDocumentError / UnresolvedReferenceError for root-level failures.
    """
    root_dict, source_name = resolve_document(document, node_id)
    root = DocumentNode.from_dict(root_dict)
    if transformers is None:
        transformers = build_transformers()

    screen = resolve_screen_box(root, _coerce_bounds(screen_bounds))

    candidates = extract_candidates(root)
    unique = deduplicate(candidates)
    components = normalize_candidates(unique, screen, transformers, alignment_tolerance)

    descriptor = assemble_descriptor(
        name=root.name or source_name or "Screen",
        screen=screen,
        components=components,
        gap_threshold=gap_threshold,
    )

    logger.info(
        f"build_screen: '{descriptor.name}' extracted={len(candidates)}, "
        f"unique={len(unique)}, sections={len(descriptor.sections)}"
    )

    return ScreenResult(
        screen=descriptor,
        version=settings.DESCRIPTOR_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        source_id=source_id or source_name,
        components_count=len(unique),
    )
