"""Rule-based semantic classification of design nodes.

Assigns each node a Category in priority order:
1. Exact-name special cases (illustrative status bar / home indicator are
   excluded; keyboard containers are keyboards)
2. Ordered keyword table matched against the lower-cased layer name
3. TEXT kind fallback
4. Structural fallback for frames/components (aspect ratio, size, text)
5. other / unknown

Pure functions, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .nodes import DocumentNode


class Category(str, Enum):
    HEADER = "header"
    INPUT = "input"
    ONBOARDING_INPUT = "onboardingInput"
    BUTTON = "button"
    KEYBOARD = "keyboard"
    ICON = "icon"
    TEXT = "text"
    LABEL = "label"
    OTHER = "other"
    UNKNOWN = "unknown"
    EXCLUDED = "excluded"


@dataclass(frozen=True)
class NameRule:
    keywords: Tuple[str, ...]
    category: Category


# --- Constants ---

# Illustrative OS chrome drawn into mockups; never part of the screen
EXCLUDED_NAMES = frozenset({"1. status-bar", "2. home-indicator"})

# Keyboard containers: emitted once, children (individual keys) never visited
KEYBOARD_CONTAINERS: Dict[str, str] = {
    "4. alphabetic-keyboard": "alphabetic",
    "5. numeric-keyboard": "numeric",
}

# First match wins
NAME_RULES: Tuple[NameRule, ...] = (
    NameRule(("button",), Category.BUTTON),
    NameRule(("header", "status-bar"), Category.HEADER),
    NameRule(("input", "field"), Category.INPUT),
    NameRule(("onboarding/default",), Category.ONBOARDING_INPUT),
    NameRule(("keyboard",), Category.KEYBOARD),
    NameRule(("icon", "ícone"), Category.ICON),
    NameRule(("text",), Category.TEXT),
)

STRUCTURAL_KINDS = frozenset({"FRAME", "COMPONENT", "INSTANCE"})

# Structural fallback thresholds (px / ratios)
BUTTON_MIN_RATIO = 2.0
BUTTON_MAX_HEIGHT = 60.0
DIVIDER_MIN_RATIO = 8.0
LABEL_MAX_HEIGHT = 40.0
LABEL_MAX_WIDTH = 200.0


def match_name_rule(name: str) -> Optional[Category]:
    """Return the category of the first keyword rule matching ``name``."""
    lower = (name or "").lower()
    if not lower:
        return None
    for rule in NAME_RULES:
        if any(kw in lower for kw in rule.keywords):
            return rule.category
    return None


def keyboard_type(node: DocumentNode) -> Optional[str]:
    """'alphabetic' / 'numeric' for exact keyboard container names, else None."""
    return KEYBOARD_CONTAINERS.get(node.name)


def is_excluded_name(node: DocumentNode) -> bool:
    return node.name in EXCLUDED_NAMES


def _structural_category(node: DocumentNode) -> Optional[Category]:
    box = node.box
    if box is None or box.height <= 0:
        return None

    ratio = box.width / box.height
    if ratio > BUTTON_MIN_RATIO and box.height < BUTTON_MAX_HEIGHT:
        return Category.BUTTON
    if ratio > DIVIDER_MIN_RATIO:
        return Category.EXCLUDED
    if (
        box.height < LABEL_MAX_HEIGHT
        and box.width < LABEL_MAX_WIDTH
        and node.has_text_descendant()
    ):
        return Category.LABEL
    return None


def classify_node(node: DocumentNode) -> Category:
    """Classify a node into its semantic Category. Deterministic."""
    if is_excluded_name(node):
        return Category.EXCLUDED
    if keyboard_type(node):
        return Category.KEYBOARD

    matched = match_name_rule(node.name)
    if matched is not None:
        return matched

    if node.kind == "TEXT":
        return Category.TEXT

    if node.kind in STRUCTURAL_KINDS:
        structural = _structural_category(node)
        if structural is not None:
            return structural

    if not node.name:
        return Category.UNKNOWN
    return Category.OTHER
