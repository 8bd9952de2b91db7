"""Structured generation: ask for a JSON object, retry on malformed output.

The retry cycle is an explicit state machine (:class:`RetryState`) so the
policy can be tested without a model: each failed parse bumps the attempt
count, records the offending text and switches the prompt to the base
prompt plus a corrective suffix.  Only parse failures are retried.
Exceptions raised by the LLM client itself propagate unchanged.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TypeVar

from ..errors import StructuredOutputError
from ..protocols.llm import LLMClientLike
from .prompts import JSON_ONLY_SUFFIX

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3


def parse_json_object(text: str) -> Dict[str, Any]:
    """Parse *text* as one JSON object.

    Tolerates a surrounding markdown fence and leading/trailing prose by
    falling back to the first balanced ``{...}`` block.

    Raises:
        ValueError: No JSON object could be decoded (``json.JSONDecodeError``
            is a ``ValueError``).
    """
    stripped = text.strip()
    if stripped.startswith("```json"):
        stripped = stripped[7:]
    elif stripped.startswith("```"):
        stripped = stripped[3:]
    if stripped.endswith("```"):
        stripped = stripped[:-3]
    stripped = stripped.strip()

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError:
        block = _first_object_block(stripped)
        if block is None:
            raise
        data = json.loads(block)

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _first_object_block(text: str) -> Optional[str]:
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escape = False
    for i in range(start, len(text)):
        ch = text[i]
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


@dataclass
class RetryState:
    """Progress of one bounded parse-retry cycle."""

    base_prompt: str
    max_retries: int = DEFAULT_MAX_RETRIES
    corrective_suffix: str = JSON_ONLY_SUFFIX
    attempts: int = 0
    last_error: Optional[Exception] = None
    last_text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_retries

    @property
    def prompt(self) -> str:
        """Base prompt, plus the corrective suffix once a parse has failed."""
        if self.last_error is None:
            return self.base_prompt
        return self.base_prompt + self.corrective_suffix

    def record_failure(self, text: str, error: Exception) -> None:
        self.attempts += 1
        self.last_error = error
        self.last_text = text

    def record_success(self) -> None:
        self.attempts += 1

    def terminal_error(self, role: str) -> StructuredOutputError:
        return StructuredOutputError(
            role=role,
            attempts=self.attempts,
            last_error=self.last_error,
            last_text=self.last_text,
        )


def generate_structured(
    llm: LLMClientLike,
    base_prompt: str,
    build: Callable[[Dict[str, Any]], T],
    *,
    role: str,
    max_retries: int = DEFAULT_MAX_RETRIES,
    corrective_suffix: str = JSON_ONLY_SUFFIX,
    **llm_kwargs: Any,
) -> T:
    """Call *llm* until its reply parses as a JSON object, then ``build`` it.

    Args:
        llm: Completion backend.
        base_prompt: Fully rendered role prompt.
        build: Turns the decoded object into the role's output.  A
            ``ValueError`` from ``build`` counts as a parse failure.
        role: Role name used in log lines and in the terminal error.
        max_retries: Total attempts before giving up.
        corrective_suffix: Appended to the base prompt after a failure.
        **llm_kwargs: Forwarded to ``llm.complete``.

    Raises:
        StructuredOutputError: Every attempt failed to parse.
    """
    state = RetryState(
        base_prompt=base_prompt,
        max_retries=max_retries,
        corrective_suffix=corrective_suffix,
    )
    while not state.exhausted:
        response = llm.complete(state.prompt, **llm_kwargs)
        try:
            result = build(parse_json_object(response.text))
        except ValueError as err:
            state.record_failure(response.text, err)
            logger.warning(
                "%s: structured parse attempt %d/%d failed: %s",
                role,
                state.attempts,
                state.max_retries,
                err,
            )
            continue
        state.record_success()
        return result

    logger.error(
        "%s: giving up after %d attempts; offending text: %r",
        role,
        state.attempts,
        state.last_text,
    )
    raise state.terminal_error(role)
