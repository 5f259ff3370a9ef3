"""Removal of nested and redundant candidates.

Extraction emits a button and also the instance that wraps it; a keyboard
frame matched by name and every key inside it. This pass keeps only the
outermost candidate of each nested chain and drops individual keyboard keys.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Set

from .classifier import Category
from .extractor import Candidate

logger = logging.getLogger("screenmap.engine.dedup")

KEY_MARKER = "key"


def _is_keyboard_key(candidate: Candidate, keyboard_ids: Set[str]) -> bool:
    return (
        candidate.category is not Category.KEYBOARD
        and KEY_MARKER in candidate.name.lower()
        and candidate.parent_id is not None
        and candidate.parent_id in keyboard_ids
    )


def deduplicate(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Drop nested candidates, keyboard keys and repeated ids.

    Order preserving and idempotent: applying it to its own output returns
    the same list.
    """
    candidate_ids = {c.id for c in candidates}
    retained: List[Candidate] = []
    retained_ids: Set[str] = set()
    keyboard_ids: Set[str] = set()

    for candidate in candidates:
        if candidate.ancestor_candidate_id and candidate.ancestor_candidate_id in candidate_ids:
            continue
        # Extracted keys already carry their keyboard as ancestor and fall to the
        # nesting rule; this one covers candidates built without ancestor links.
        if _is_keyboard_key(candidate, keyboard_ids):
            continue
        if candidate.id in retained_ids:
            continue

        retained.append(candidate)
        retained_ids.add(candidate.id)
        if candidate.category is Category.KEYBOARD:
            keyboard_ids.add(candidate.id)

    if len(retained) != len(candidates):
        logger.debug(
            f"deduplicate: kept {len(retained)} of {len(candidates)} candidates"
        )
    return retained
