"""LiteLLM client: cloud completion backend for 100+ providers.

Satisfies the ``LLMClientLike`` protocol used by Generator, Reflector and
Curator.  Provider errors are logged and re-raised unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from litellm import completion

from ..config import LLMConfig
from .base import LLMResponse, strip_loop_kwargs

logger = logging.getLogger(__name__)


class LiteLLMClient:
    """Production LLM client using LiteLLM.

    Example::

        client = LiteLLMClient(LLMConfig(model="gpt-4o-mini"))
        response = client.complete("What is the capital of France?")
    """

    def __init__(self, config: LLMConfig) -> None:
        if not config.model:
            raise ValueError("LiteLLMClient requires config.model")
        self.config = config
        self.model = config.model

    def __repr__(self) -> str:
        return f"LiteLLMClient(model={self.model!r})"

    # -- Call building --------------------------------------------------------

    def _build_call_params(
        self, messages: List[Dict[str, str]], **kwargs: Any
    ) -> Dict[str, Any]:
        """Build the parameter dict for a litellm.completion() call."""
        kwargs = strip_loop_kwargs(kwargs)
        call_params: Dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": kwargs.pop("temperature", self.config.temperature),
            "max_tokens": kwargs.pop("max_tokens", self.config.max_tokens),
            "timeout": kwargs.pop("timeout", self.config.timeout),
            "num_retries": kwargs.pop("num_retries", self.config.max_retries),
            "drop_params": True,
        }
        if self.config.api_key:
            call_params["api_key"] = self.config.api_key
        if self.config.api_base:
            call_params["api_base"] = self.config.api_base
        call_params.update(self.config.extra_params)
        call_params.update(kwargs)
        return call_params

    # -- Completion -----------------------------------------------------------

    def complete(
        self, prompt: str, system: Optional[str] = None, **kwargs: Any
    ) -> LLMResponse:
        """Generate a completion for *prompt*."""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        call_params = self._build_call_params(messages, **kwargs)
        try:
            response = completion(**call_params)
        except Exception as e:
            logger.error("Error in LiteLLM completion: %s", e)
            raise

        text = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        metadata = {
            "model": getattr(response, "model", self.model),
            "usage": usage.model_dump() if hasattr(usage, "model_dump") else usage,
            "provider": self._get_provider_from_model(
                getattr(response, "model", None) or self.model
            ),
        }
        return LLMResponse(text=text, raw=metadata)

    # -- Helpers --------------------------------------------------------------

    @staticmethod
    def _get_provider_from_model(model: str) -> str:
        """Infer provider from model name."""
        model_lower = model.lower()
        if "gpt" in model_lower or "openai" in model_lower:
            return "openai"
        if "claude" in model_lower or "anthropic" in model_lower:
            return "anthropic"
        if "gemini" in model_lower:
            return "google"
        if "llama" in model_lower or "mistral" in model_lower:
            return "meta"
        return "unknown"
