"""Category-indexed view of normalized components."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Set

from .classifier import Category
from .geometry import NormalizedComponent

_LIST_KEYS = {
    Category.INPUT: "inputs",
    Category.ONBOARDING_INPUT: "inputs",
    Category.BUTTON: "buttons",
    Category.ICON: "icons",
    Category.TEXT: "texts",
}


def _is_higher_header(candidate: NormalizedComponent, current: Optional[NormalizedComponent]) -> bool:
    if current is None:
        return True
    if candidate.position.y != current.position.y:
        return candidate.position.y < current.position.y
    return candidate.size.width > current.size.width


def categorize_by_type(components: Sequence[NormalizedComponent]) -> Dict[str, Any]:
    """Single-pass reduction into {header, inputs, buttons, keyboard, icons, texts, other}.

    Only the top-most header (widest on ties) and the widest keyboard are kept.
    Unclassified components that are a direct child of an already-seen
    component are dropped. Empty entries are removed from the result.
    """
    header: Optional[NormalizedComponent] = None
    keyboard: Optional[NormalizedComponent] = None
    lists: Dict[str, List[NormalizedComponent]] = {
        "inputs": [], "buttons": [], "icons": [], "texts": [], "other": [],
    }
    seen_ids: Set[str] = set()
    seen_child_ids: Set[str] = set()

    for component in components:
        if component.id in seen_ids:
            continue

        if component.category is Category.HEADER:
            if _is_higher_header(component, header):
                header = component
        elif component.category is Category.KEYBOARD:
            if keyboard is None or component.size.width > keyboard.size.width:
                keyboard = component
        elif component.category in _LIST_KEYS:
            lists[_LIST_KEYS[component.category]].append(component)
        elif component.id not in seen_child_ids:
            lists["other"].append(component)

        seen_ids.add(component.id)
        seen_child_ids.update(component.child_ids)

    categories: Dict[str, Any] = {
        "header": header,
        "inputs": lists["inputs"],
        "buttons": lists["buttons"],
        "keyboard": keyboard,
        "icons": lists["icons"],
        "texts": lists["texts"],
        "other": lists["other"],
    }
    return {key: value for key, value in categories.items() if value}
