"""Depth-first candidate extraction from a document tree.

Selection is decoupled from traversal: ``selection_policy`` decides, per
node, whether it is emitted as a Candidate and whether its subtree is
visited. ``extract_candidates`` walks the tree in pre-order with an explicit
stack and applies the policy. The pre-order index becomes the tie-break
order used by the section grouper.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .classifier import (
    Category,
    classify_node,
    is_excluded_name,
    keyboard_type,
    match_name_rule,
)
from .nodes import DocumentNode

logger = logging.getLogger("screenmap.engine.extractor")

COMPONENT_KINDS = frozenset({"COMPONENT", "INSTANCE"})


@dataclass(frozen=True)
class Selection:
    emit: bool
    descend: bool
    category: Category = Category.UNKNOWN


@dataclass(frozen=True)
class Candidate:
    """A node selected for inclusion, tagged with its inferred Category."""

    node: DocumentNode
    category: Category
    order: int
    parent_id: Optional[str] = None
    ancestor_candidate_id: Optional[str] = None

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def name(self) -> str:
        return self.node.name


_SKIP = Selection(emit=False, descend=False, category=Category.EXCLUDED)


def selection_policy(node: DocumentNode) -> Selection:
    """Decide {emit, descend} for a single node."""
    if is_excluded_name(node):
        return _SKIP

    # Keyboard containers are emitted whatever their visibility, keys never visited
    if keyboard_type(node):
        return Selection(emit=True, descend=False, category=Category.KEYBOARD)

    if not node.visible:
        return _SKIP

    category = classify_node(node)
    if category is Category.EXCLUDED:
        return _SKIP

    emit = (
        node.kind in COMPONENT_KINDS
        or match_name_rule(node.name) is not None
        or (node.kind == "FRAME" and "keyboard" in node.lower_name)
    )
    return Selection(emit=emit, descend=True, category=category)


def extract_candidates(root: DocumentNode) -> List[Candidate]:
    """Walk ``root`` depth-first and return candidates in traversal order.

    The root itself is the screen frame: it is descended into but never
    emitted. Complexity is O(nodes).
    """
    candidates: List[Candidate] = []
    # (node, parent_id, nearest emitted ancestor id)
    stack: List[Tuple[DocumentNode, Optional[str], Optional[str]]] = [
        (child, root.id or None, None) for child in reversed(root.children)
    ]

    while stack:
        node, parent_id, ancestor_id = stack.pop()
        selection = selection_policy(node)

        if selection.emit:
            candidates.append(Candidate(
                node=node,
                category=selection.category,
                order=len(candidates),
                parent_id=parent_id,
                ancestor_candidate_id=ancestor_id,
            ))
            logger.debug(
                f"extract_candidates: {node.name!r} ({node.kind}) -> {selection.category.value}"
            )

        if selection.descend:
            next_ancestor = node.id if selection.emit else ancestor_id
            stack.extend(
                (child, node.id, next_ancestor) for child in reversed(node.children)
            )

    logger.debug(f"extract_candidates: {len(candidates)} candidates from '{root.name}'")
    return candidates
