"""Local inference client backed by a Hugging Face text-generation pipeline."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from ..config import LLMConfig
from .base import LLMResponse, strip_loop_kwargs

logger = logging.getLogger(__name__)


def _build_pipeline(config: LLMConfig) -> Callable[..., Any]:
    # Imported lazily so the cloud backend never pays for torch
    try:
        from transformers import pipeline
    except ImportError as exc:
        raise ImportError(
            "Local inference requires transformers. "
            "Install with: pip install 'ace-playbook[local]'"
        ) from exc

    kwargs: Dict[str, Any] = {"model": config.model}
    if config.device_map:
        kwargs["device_map"] = config.device_map
    logger.info("Loading local text-generation pipeline for %s", config.model)
    return pipeline("text-generation", **kwargs)


class TransformersLLMClient:
    """Runs prompts through a local ``text-generation`` pipeline.

    Args:
        config: Backend config; ``model`` names the Hugging Face model.
        pipe: Pre-built pipeline callable.  Built from *config* when omitted.
    """

    def __init__(
        self, config: LLMConfig, pipe: Optional[Callable[..., Any]] = None
    ) -> None:
        self.config = config
        self.model = config.model
        self._pipe = pipe if pipe is not None else _build_pipeline(config)
        self._defaults: Dict[str, Any] = {
            "max_new_tokens": config.max_tokens,
            "do_sample": config.temperature > 0.0,
            "return_full_text": False,
        }
        if config.temperature > 0.0:
            self._defaults["temperature"] = config.temperature
        self._defaults.update(config.extra_params)

    def __repr__(self) -> str:
        return f"TransformersLLMClient(model={self.model!r})"

    def complete(self, prompt: str, **kwargs: Any) -> LLMResponse:
        params = {**self._defaults, **strip_loop_kwargs(kwargs)}
        output = self._pipe(prompt, **params)
        text = output[0]["generated_text"] if output else ""
        return LLMResponse(text=str(text), raw={"model": self.model, "output": output})
