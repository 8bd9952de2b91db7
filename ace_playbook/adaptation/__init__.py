"""Adaptation loops: compose the step pipeline and drive it over samples."""

from .base import AdapterBase, AdapterStepResult
from .offline import OfflineAdapter
from .online import OnlineAdapter

__all__ = [
    "AdapterBase",
    "AdapterStepResult",
    "OfflineAdapter",
    "OnlineAdapter",
]
