"""Completion backends, selected by configuration.

- ``LiteLLMClient``: cloud providers via LiteLLM
- ``TransformersLLMClient``: local Hugging Face text-generation pipeline
- ``DummyLLMClient``: scripted responses for tests
"""

from __future__ import annotations

from ..config import LLMConfig
from ..protocols.llm import LLMClientLike
from .base import LLMResponse
from .dummy import DummyLLMClient
from .local import TransformersLLMClient


def create_llm_client(config: LLMConfig) -> LLMClientLike:
    """Build the backend named by ``config.backend``."""
    if config.backend == "dummy":
        return DummyLLMClient(config.responses)
    if config.backend == "transformers":
        return TransformersLLMClient(config)
    # Deferred so the scripted and local backends work without importing litellm
    from .litellm import LiteLLMClient

    return LiteLLMClient(config)


__all__ = [
    "DummyLLMClient",
    "LLMResponse",
    "TransformersLLMClient",
    "create_llm_client",
]
