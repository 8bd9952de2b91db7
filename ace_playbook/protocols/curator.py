"""Protocol defining what steps need from a Curator implementation."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..core.outputs import CuratorOutput, ReflectorOutput


@runtime_checkable
class CuratorLike(Protocol):
    """Structural interface for Curator-like objects."""

    def curate(
        self,
        *,
        reflection: ReflectorOutput,
        playbook: Any,
        question_context: str,
        progress: str,
        **kwargs: Any,
    ) -> CuratorOutput: ...
