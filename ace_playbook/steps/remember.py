"""RememberStep: pushes the reflection onto the rolling window."""

from __future__ import annotations

from ..core.context import AdaptationContext, ReflectionWindow


class RememberStep:
    """Append the serialized reflection to the adapter's ReflectionWindow.

    The window evicts the oldest entry beyond its size; later samples see
    it through ``ctx.reflection_context``.
    """

    requires = frozenset({"reflection"})
    provides = frozenset()

    def __init__(self, window: ReflectionWindow) -> None:
        self.window = window

    def __call__(self, ctx: AdaptationContext) -> AdaptationContext:
        self.window.push(ctx.reflection)
        return ctx
