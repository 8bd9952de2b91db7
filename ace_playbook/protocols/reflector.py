"""Protocol defining what steps need from a Reflector implementation."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from ..core.outputs import GeneratorOutput, ReflectorOutput


@runtime_checkable
class ReflectorLike(Protocol):
    """Structural interface for Reflector-like objects."""

    def reflect(
        self,
        *,
        question: str,
        generator_output: GeneratorOutput,
        playbook: Any,
        ground_truth: Optional[str] = ...,
        feedback: Optional[str] = ...,
        max_refinement_rounds: int = ...,
        **kwargs: Any,
    ) -> ReflectorOutput: ...
