"""Public contracts: protocols that steps depend on, not concrete classes."""

from .curator import CuratorLike
from .generator import GeneratorLike
from .llm import LLMClientLike
from .reflector import ReflectorLike

__all__ = [
    "CuratorLike",
    "GeneratorLike",
    "LLMClientLike",
    "ReflectorLike",
]
