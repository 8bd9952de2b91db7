"""Configuration objects for LLM backends and the adaptation loop.

Both configs are plain dataclasses.  ``from_env()`` reads ``ACE_*``
variables, loading a ``.env`` file first when one is present.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, TypeVar

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

Backend = Literal["litellm", "transformers", "dummy"]
BACKENDS = ("litellm", "transformers", "dummy")

ENV_PREFIX = "ACE_"

V = TypeVar("V")


def _env(name: str, cast: Callable[[str], V], default: V) -> V:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from exc


def _load_env_file(env_file: Optional[str]) -> None:
    if load_dotenv(dotenv_path=env_file, override=False):
        logger.debug("Loaded environment from %s", env_file or ".env")


# ---------------------------------------------------------------------------
# LLMConfig
# ---------------------------------------------------------------------------


@dataclass
class LLMConfig:
    """Which completion backend to build, and how."""

    backend: Backend = "litellm"
    model: Optional[str] = None
    api_key: Optional[str] = None
    api_base: Optional[str] = None
    temperature: float = 0.0
    max_tokens: int = 2048
    timeout: int = 60
    # Backend-level transport retries (LiteLLM only); roles never retry transport
    max_retries: int = 3

    # Local inference
    device_map: Optional[str] = None

    # Scripted responses for the dummy backend
    responses: List[str] = field(default_factory=list)

    # Passed through to the backend call
    extra_params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown LLM backend {self.backend!r}; expected one of {BACKENDS}"
            )
        if self.backend != "dummy" and not self.model:
            raise ValueError(f"Backend {self.backend!r} requires a model name")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "LLMConfig":
        _load_env_file(env_file)
        return cls(
            backend=_env("LLM_BACKEND", str, "litellm"),  # type: ignore[arg-type]
            model=_env("MODEL", str, None),  # type: ignore[arg-type]
            api_key=_env("API_KEY", str, None),  # type: ignore[arg-type]
            api_base=_env("API_BASE", str, None),  # type: ignore[arg-type]
            temperature=_env("TEMPERATURE", float, 0.0),
            max_tokens=_env("MAX_TOKENS", int, 2048),
            timeout=_env("TIMEOUT", int, 60),
            device_map=_env("DEVICE_MAP", str, None),  # type: ignore[arg-type]
        )


# ---------------------------------------------------------------------------
# AdaptationConfig
# ---------------------------------------------------------------------------


@dataclass
class AdaptationConfig:
    """Knobs for the roles and the adaptation loop."""

    # Malformed-output retry ceiling per role call
    max_retries: int = 3
    max_refinement_rounds: int = 1
    reflection_window: int = 3
    epochs: int = 1
    checkpoint_dir: Optional[str] = None
    checkpoint_interval: int = 10

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.max_refinement_rounds < 1:
            raise ValueError("max_refinement_rounds must be >= 1")
        if self.reflection_window < 0:
            raise ValueError("reflection_window must be >= 0")
        if self.epochs < 1:
            raise ValueError("epochs must be >= 1")
        if self.checkpoint_interval < 1:
            raise ValueError("checkpoint_interval must be >= 1")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AdaptationConfig":
        _load_env_file(env_file)
        return cls(
            max_retries=_env("MAX_RETRIES", int, 3),
            max_refinement_rounds=_env("REFINEMENT_ROUNDS", int, 1),
            reflection_window=_env("REFLECTION_WINDOW", int, 3),
            epochs=_env("EPOCHS", int, 1),
            checkpoint_dir=_env("CHECKPOINT_DIR", str, None),  # type: ignore[arg-type]
            checkpoint_interval=_env("CHECKPOINT_INTERVAL", int, 10),
        )
