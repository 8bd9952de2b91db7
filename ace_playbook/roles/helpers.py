"""Shared utilities for the role implementations."""

from __future__ import annotations

import re
from typing import Any, List, Optional, Sequence


def extract_cited_bullet_ids(text: str) -> List[str]:
    """Extract bullet IDs cited in text using ``[id-format]`` notation.

    Parses ``[section-00001]`` patterns and returns unique IDs in order
    of first appearance.

    Example::

        >>> extract_cited_bullet_ids("Following [general-00042], I checked units.")
        ['general-00042']
    """
    matches = re.findall(r"\[([A-Za-z0-9_]*-\d+)\]", text)
    return list(dict.fromkeys(matches))


def format_optional(value: Optional[str]) -> str:
    """Return *value* or ``"(none)"`` when falsy."""
    return value or "(none)"


def as_text(value: Any) -> str:
    """Coerce a decoded JSON value to text; ``None`` becomes ``""``."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def make_playbook_excerpt(playbook: Any, bullet_ids: Sequence[str]) -> str:
    """Build a compact excerpt of cited bullets.

    Args:
        playbook: Playbook (or view) to look bullets up in.
        bullet_ids: Ordered bullet IDs cited by the generator.

    Returns:
        One ``[id] content`` line per unique cited bullet found.
    """
    lines: list[str] = []
    seen: set[str] = set()
    for bullet_id in bullet_ids:
        if bullet_id in seen:
            continue
        bullet = playbook.get_bullet(bullet_id)
        if bullet:
            seen.add(bullet_id)
            lines.append(f"[{bullet.id}] {bullet.content}")
    return "\n".join(lines)
