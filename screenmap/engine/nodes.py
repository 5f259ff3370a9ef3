"""Read-only typed view over Figma document nodes.

Wraps the raw REST API node dicts (``id``, ``name``, ``type``, ``visible``,
``absoluteBoundingBox``, ``children``, ``fills``, ``strokes``, ``cornerRadius``,
``opacity``, ``characters``) in frozen dataclasses. The original dict stays
on ``raw`` for the leaf transformers, which read styling fields directly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


def coerce_number(value: Any) -> float:
    """Coerce a numeric field to a finite float, 0.0 when malformed."""
    if isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def round_half_up(value: float) -> int:
    """Round exact halves up (100.5 -> 101, -0.5 -> 0), unlike banker's ``round``."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class BoundingBox:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> Optional["BoundingBox"]:
        """Build a box from ``absoluteBoundingBox``.

        Returns None when the box is absent. Malformed fields become 0 and
        negative sizes are clamped to 0, so a broken box never aborts a run.
        """
        if not isinstance(data, Mapping):
            return None
        return cls(
            x=coerce_number(data.get("x", 0)),
            y=coerce_number(data.get("y", 0)),
            width=max(coerce_number(data.get("width", 0)), 0.0),
            height=max(coerce_number(data.get("height", 0)), 0.0),
        )

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def _paint_list(value: Any) -> Tuple[Mapping[str, Any], ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(v for v in value if isinstance(v, Mapping))


def _child_dicts(data: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    children = data.get("children")
    if not isinstance(children, (list, tuple)):
        return []
    return [child for child in children if isinstance(child, Mapping)]


@dataclass(frozen=True)
class DocumentNode:
    """Immutable view of one node in the design tree."""

    id: str
    name: str
    kind: str
    visible: bool = True
    box: Optional[BoundingBox] = None
    children: Tuple["DocumentNode", ...] = ()
    has_fills: bool = False
    has_strokes: bool = False
    corner_radius: Optional[float] = None
    opacity: Optional[float] = None
    text: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocumentNode":
        """Build a node tree from a Figma node dict.

        Post-order walk over an explicit stack, so tree depth is not bounded
        by the interpreter's recursion limit. Non-dict children (``null``
        entries in noisy exports) are dropped.
        """
        built: Dict[int, DocumentNode] = {}
        stack: List[Tuple[Mapping[str, Any], bool]] = [(data, False)]
        while stack:
            current, expanded = stack.pop()
            children = _child_dicts(current)
            if not expanded:
                stack.append((current, True))
                stack.extend((child, False) for child in reversed(children))
                continue
            built[id(current)] = cls._from_fields(
                current, tuple(built[id(child)] for child in children)
            )
        return built[id(data)]

    @classmethod
    def _from_fields(
        cls,
        data: Mapping[str, Any],
        children: Tuple["DocumentNode", ...],
    ) -> "DocumentNode":
        kind = str(data.get("type") or "")
        characters = data.get("characters")
        corner_radius = data.get("cornerRadius")
        opacity = data.get("opacity")
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            kind=kind,
            visible=data.get("visible", True) is not False,
            box=BoundingBox.from_dict(data.get("absoluteBoundingBox")),
            children=children,
            has_fills=bool(_paint_list(data.get("fills"))),
            has_strokes=bool(_paint_list(data.get("strokes"))),
            corner_radius=coerce_number(corner_radius) if corner_radius is not None else None,
            opacity=coerce_number(opacity) if opacity is not None else None,
            text=characters if kind == "TEXT" and isinstance(characters, str) else None,
            raw=data,
        )

    def paints(self, key: str) -> Tuple[Mapping[str, Any], ...]:
        """Dict entries of a list-valued raw field (``fills``, ``strokes``, ``effects``)."""
        return _paint_list(self.raw.get(key))

    @property
    def lower_name(self) -> str:
        return self.name.lower()

    @property
    def child_ids(self) -> Tuple[str, ...]:
        return tuple(child.id for child in self.children if child.id)

    def iter_descendants(self) -> Iterator["DocumentNode"]:
        """Yield every descendant in depth-first pre-order (self excluded)."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def has_text_descendant(self) -> bool:
        return any(node.kind == "TEXT" for node in self.iter_descendants())

    def find(self, node_id: str) -> Optional["DocumentNode"]:
        if self.id == node_id:
            return self
        for node in self.iter_descendants():
            if node.id == node_id:
                return node
        return None
