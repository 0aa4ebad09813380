"""Keyword heuristic assigning a category to a changelog item.

The category is derived data: it is recomputed from the item text on every
access and never stored, so the rules below can change without migrating
anything. Misclassification is expected and harmless.
"""

from __future__ import annotations

from typing import Literal

ItemType = Literal["feature", "fix", "removal", "breaking", "other"]

_REMOVAL_WORDS = ("removed", "deprecated", "no longer")
_FIX_WORDS = ("fix", "fixed", "bug", "issue")
_FEATURE_WORDS = ("add", "new", "feature", "support")


def categorize_item(content: str) -> ItemType:
    """Classify ``content`` using case-insensitive keyword rules.

    Rules are evaluated in priority order:

    1. ``breaking`` – mentions "breaking", or both "removed" and "support".
    2. ``removal`` – mentions "removed", "deprecated" or "no longer".
    3. ``fix`` – mentions "fix", "fixed", "bug" or "issue".
    4. ``feature`` – mentions "add", "new", "feature" or "support".
    5. ``other`` – anything else.

    Args:
        content: Raw inline markdown of a single changelog bullet.

    Returns:
        The derived item category.
    """

    text = content.lower()
    if "breaking" in text or ("removed" in text and "support" in text):
        return "breaking"
    if any(word in text for word in _REMOVAL_WORDS):
        return "removal"
    if any(word in text for word in _FIX_WORDS):
        return "fix"
    if any(word in text for word in _FEATURE_WORDS):
        return "feature"
    return "other"


__all__ = ["ItemType", "categorize_item"]
