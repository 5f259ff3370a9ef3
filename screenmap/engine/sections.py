"""Vertical section grouping.

Components are ordered top-to-bottom and split into contiguous sections
wherever the vertical gap between consecutive components exceeds
``SECTION_GAP_THRESHOLD``. The first section is always titled "Header";
later titles come from the first component each section keeps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set

from screenmap import settings

from .classifier import Category
from .geometry import NormalizedComponent

logger = logging.getLogger("screenmap.engine.sections")

FIRST_SECTION_TITLE = "Header"
DEFAULT_SECTION_TITLE = "Content"


@dataclass(frozen=True)
class Section:
    id: str
    title: str
    components: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "components": [c.to_dict() for c in self.components],
        }


@dataclass
class _OpenSection:
    title: Optional[str]
    components: List[NormalizedComponent] = field(default_factory=list)


def order_components(components: Sequence[NormalizedComponent]) -> List[NormalizedComponent]:
    """Stable top-to-bottom order; equal y keeps traversal order."""
    return sorted(components, key=lambda c: (c.position.y, c.order))


def section_title_for(component: NormalizedComponent) -> str:
    if component.category is Category.KEYBOARD:
        return "Keyboard"
    if component.category in (Category.INPUT, Category.ONBOARDING_INPUT):
        return "Input"
    if component.category is Category.BUTTON:
        return "Button"
    if "button" in component.name.lower():
        return "Button Area"
    return DEFAULT_SECTION_TITLE


def _is_consumed_key(
    component: NormalizedComponent,
    previous: Optional[NormalizedComponent],
) -> bool:
    """A standalone key right after its keyboard is already represented by it."""
    return (
        previous is not None
        and previous.category is Category.KEYBOARD
        and component.category is not Category.KEYBOARD
        and "key" in component.name.lower()
    )


def group_into_sections(
    components: Sequence[NormalizedComponent],
    gap_threshold: Optional[float] = None,
) -> List[Section]:
    """Partition components into vertically contiguous sections.

    Args:
        components: Normalized components, in any order; they are sorted
            with ``order_components`` first.
        gap_threshold: Gap in px that opens a new section. Defaults to
            ``settings.SECTION_GAP_THRESHOLD``.

    Returns:
        Sections with stable 1-based ids (``section-1``, ``section-2``, ...).
        Empty input yields an empty list.
    """
    if gap_threshold is None:
        gap_threshold = settings.SECTION_GAP_THRESHOLD
    ordered = order_components(components)
    if not ordered:
        return []

    closed: List[_OpenSection] = []
    current = _OpenSection(title=FIRST_SECTION_TITLE)
    last_y = ordered[0].position.y
    last_height = ordered[0].size.height
    previous: Optional[NormalizedComponent] = None
    seen_ids: Set[str] = set()

    for index, component in enumerate(ordered):
        if component.id in seen_ids:
            continue

        vertical_gap = component.position.y - (last_y + last_height)
        if index > 0 and vertical_gap > gap_threshold:
            if current.components:
                closed.append(current)
            # Titled by the first component it actually keeps
            current = _OpenSection(title=None)

        if not _is_consumed_key(component, previous):
            if current.title is None:
                current.title = section_title_for(component)
            current.components.append(component)
            seen_ids.add(component.id)

        last_y = component.position.y
        last_height = component.size.height
        previous = component

    if current.components:
        closed.append(current)

    sections = [
        Section(id=f"section-{i}", title=s.title, components=tuple(s.components))
        for i, s in enumerate(closed, 1)
    ]
    logger.debug(f"group_into_sections: {len(ordered)} components -> {len(sections)} sections")
    return sections
