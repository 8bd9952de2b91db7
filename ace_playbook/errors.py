"""Error types raised by ace_playbook."""

from __future__ import annotations

from typing import Optional


class InvalidTagError(ValueError):
    """A counter name outside helpful/harmful/neutral was targeted."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Unsupported tag: {tag}")


class StructuredOutputError(ValueError):
    """A role exhausted its retries without getting a parseable JSON object.

    Carries the last parser error and the offending model text so prompt or
    model drift can be diagnosed from the exception alone.
    """

    def __init__(
        self,
        role: str,
        attempts: int,
        last_error: Optional[BaseException],
        last_text: Optional[str],
    ) -> None:
        self.role = role
        self.attempts = attempts
        self.last_error = last_error
        self.last_text = last_text
        super().__init__(
            f"{role} failed to produce valid JSON after {attempts} attempt(s): "
            f"{last_error}\nOffending text:\n{last_text}"
        )


class ScriptExhaustedError(RuntimeError):
    """The scripted LLM client was asked for more responses than queued."""
