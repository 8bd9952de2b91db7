"""Scripted LLM client for deterministic tests and dry runs."""

from __future__ import annotations

import json
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional, Union

from ..errors import ScriptExhaustedError
from .base import LLMResponse


class DummyLLMClient:
    """Returns queued responses in order and records every prompt it sees.

    Dict responses are JSON-encoded on the way in.  Asking for more
    responses than were queued raises ``ScriptExhaustedError``.
    """

    model = "dummy"

    def __init__(
        self, responses: Optional[Iterable[Union[str, Dict[str, Any]]]] = None
    ) -> None:
        self._responses: Deque[str] = deque()
        self.prompts: List[str] = []
        self.calls: List[Dict[str, Any]] = []
        for response in responses or []:
            self.queue(response)

    def queue(self, response: Union[str, Dict[str, Any]]) -> None:
        """Enqueue a response to be used on the next completion call."""
        if not isinstance(response, str):
            response = json.dumps(response)
        self._responses.append(response)

    @property
    def remaining(self) -> int:
        return len(self._responses)

    def complete(self, prompt: str, **kwargs: Any) -> LLMResponse:
        if not self._responses:
            raise ScriptExhaustedError("DummyLLMClient ran out of queued responses.")
        self.prompts.append(prompt)
        self.calls.append(dict(kwargs))
        return LLMResponse(text=self._responses.popleft(), raw=None)
