"""Concrete LLM-based role implementations."""

from .curator import Curator
from .generator import Generator
from .reflector import Reflector
from .structured import RetryState, generate_structured, parse_json_object

__all__ = [
    "Curator",
    "Generator",
    "Reflector",
    "RetryState",
    "generate_structured",
    "parse_json_object",
]
