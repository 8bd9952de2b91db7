"""LLMResponse: lightweight container for completion outputs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Loop-internal keyword arguments that must never reach a backend call
LOOP_ONLY_KWARGS = frozenset({"refinement_round", "role", "attempt"})


@dataclass
class LLMResponse:
    """Container for LLM outputs."""

    text: str
    raw: Optional[Dict[str, Any]] = None


def strip_loop_kwargs(kwargs: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if k not in LOOP_ONLY_KWARGS}
