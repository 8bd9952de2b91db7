"""LLMClientLike: structural protocol for completion backends."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..providers.base import LLMResponse


@runtime_checkable
class LLMClientLike(Protocol):
    """Minimal interface that any completion backend must satisfy.

    Concrete implementations include ``LiteLLMClient``,
    ``TransformersLLMClient`` and ``DummyLLMClient``.  Transport, auth and
    quota failures are raised as-is; the roles never retry them.
    """

    def complete(self, prompt: str, **kwargs: Any) -> "LLMResponse":
        """Return a text response for *prompt*."""
        ...
