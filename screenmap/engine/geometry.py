"""Geometric normalization of candidates against the screen frame.

Rebases absolute Figma coordinates to the screen's top-left corner, adds
fractional (relative) coordinates and infers horizontal alignment from the
left/right margins. Relative values are deliberately not clamped: components
bleeding off-screen keep their negative or >1.0 fractions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from screenmap import settings

from .classifier import Category
from .extractor import Candidate
from .nodes import BoundingBox, DocumentNode, round_half_up
from .transformers import TransformerMap, apply_transformer, build_transformers


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    def to_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class Alignment:
    horizontal: str  # "left" | "center" | "right"
    left: int
    right: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "horizontal": self.horizontal,
            "margins": {"left": self.left, "right": self.right},
        }


@dataclass(frozen=True)
class NormalizedComponent:
    """A candidate enriched with screen-relative geometry. Immutable."""

    id: str
    name: str
    kind: str
    category: Category
    order: int
    position: Point
    relative_position: Point
    size: Size
    alignment: Alignment
    visible: bool = True
    parent_id: Optional[str] = None
    child_ids: Tuple[str, ...] = ()
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)
    asset_node_ids: Tuple[str, ...] = ()
    assets: Dict[str, str] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.category.value,
            "nodeType": self.kind,
            "position": self.position.to_dict(),
            "relativePosition": self.relative_position.to_dict(),
            "size": self.size.to_dict(),
            "alignment": self.alignment.to_dict(),
        }
        if not self.visible:
            out["visible"] = False
        if self.properties:
            out["properties"] = self.properties
        if self.assets:
            out["assets"] = dict(self.assets)
        return out


def resolve_screen_box(
    root: Optional[DocumentNode] = None,
    override: Optional[BoundingBox] = None,
) -> BoundingBox:
    """Pick the screen frame: override, else root box, else the default size.

    Boxes with zero width or height are unusable as a frame and skipped.
    """
    for box in (override, root.box if root is not None else None):
        if box is not None and not box.is_empty:
            return box
    return BoundingBox(
        x=0.0,
        y=0.0,
        width=settings.DEFAULT_SCREEN_WIDTH,
        height=settings.DEFAULT_SCREEN_HEIGHT,
    )


def determine_alignment(
    x: float,
    width: float,
    screen_width: float,
    tolerance: Optional[float] = None,
) -> Alignment:
    """Infer horizontal alignment from left/right margins."""
    if tolerance is None:
        tolerance = settings.ALIGNMENT_TOLERANCE
    left_margin = x
    right_margin = screen_width - (x + width)

    horizontal = "left"
    if abs(left_margin - right_margin) < tolerance:
        horizontal = "center"
    elif left_margin > right_margin:
        horizontal = "right"

    return Alignment(
        horizontal=horizontal,
        left=round_half_up(left_margin),
        right=round_half_up(right_margin),
    )


def is_image_node(node: DocumentNode) -> bool:
    """IMAGE nodes, icon vectors, and anything painted with an image fill."""
    if node.kind == "IMAGE":
        return True
    if node.kind == "VECTOR" and "icon" in node.lower_name:
        return True
    return any(f.get("type") == "IMAGE" for f in node.paints("fills"))


def collect_asset_node_ids(node: DocumentNode) -> Tuple[str, ...]:
    ids = [n.id for n in (node, *node.iter_descendants()) if n.id and is_image_node(n)]
    return tuple(dict.fromkeys(ids))


def normalize_candidate(
    candidate: Candidate,
    screen: BoundingBox,
    transformers: Optional[TransformerMap] = None,
    tolerance: Optional[float] = None,
) -> NormalizedComponent:
    """Normalize one candidate. Pure; a missing box degrades to zeros."""
    if transformers is None:
        transformers = build_transformers()
    if screen.is_empty:
        screen = resolve_screen_box()
    node = candidate.node
    box = node.box or BoundingBox()

    x = round_half_up(box.x - screen.x)
    y = round_half_up(box.y - screen.y)
    size = Size(width=round_half_up(box.width), height=round_half_up(box.height))

    return NormalizedComponent(
        id=node.id,
        name=node.name,
        kind=node.kind,
        category=candidate.category,
        order=candidate.order,
        position=Point(x=x, y=y),
        relative_position=Point(
            x=round_half_up((box.x - screen.x) / screen.width * 100) / 100,
            y=round_half_up((box.y - screen.y) / screen.height * 100) / 100,
        ),
        size=size,
        alignment=determine_alignment(x, size.width, screen.width, tolerance),
        visible=node.visible,
        parent_id=candidate.parent_id,
        child_ids=node.child_ids,
        properties=apply_transformer(node, candidate.category, transformers),
        asset_node_ids=collect_asset_node_ids(node),
    )


def normalize_candidates(
    candidates: Sequence[Candidate],
    screen: BoundingBox,
    transformers: Optional[TransformerMap] = None,
    tolerance: Optional[float] = None,
) -> List[NormalizedComponent]:
    if transformers is None:
        transformers = build_transformers()
    return [
        normalize_candidate(candidate, screen, transformers, tolerance)
        for candidate in candidates
    ]
