"""Protocol defining what steps need from a Generator implementation."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from ..core.outputs import GeneratorOutput


@runtime_checkable
class GeneratorLike(Protocol):
    """Structural interface for Generator-like objects."""

    def generate(
        self,
        *,
        question: str,
        context: Optional[str],
        playbook: Any,
        reflection: Optional[str] = ...,
        **kwargs: Any,
    ) -> GeneratorOutput: ...
