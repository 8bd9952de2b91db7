"""Structural protocol for pipeline steps."""

from __future__ import annotations

from collections.abc import Set as AbstractSet
from typing import Protocol, runtime_checkable

from .context import StepContext


@runtime_checkable
class StepProtocol(Protocol):
    """Structural protocol that every step (and Pipeline itself) satisfies.

    ``requires`` names the context fields a step reads, ``provides`` the
    fields it writes.  Plain ``set`` literals are accepted; the pipeline
    normalises them to ``frozenset``.
    """

    requires: AbstractSet[str]
    provides: AbstractSet[str]

    def __call__(self, ctx: StepContext) -> StepContext: ...
