"""GenerateStep: runs the Generator role to produce an attempt."""

from __future__ import annotations

from ..core.context import AdaptationContext
from ..protocols import GeneratorLike


class GenerateStep:
    """Execute the Generator against the current sample and playbook.

    Reads the playbook via ``ctx.playbook`` (a ``PlaybookView``) and the
    rolling reflection window via ``ctx.reflection_context``.
    """

    requires = frozenset({"sample", "playbook"})
    provides = frozenset({"generator_output"})

    def __init__(self, generator: GeneratorLike) -> None:
        self.generator = generator

    def __call__(self, ctx: AdaptationContext) -> AdaptationContext:
        generator_output = self.generator.generate(
            question=ctx.sample.question,
            context=ctx.sample.context,
            playbook=ctx.playbook,
            reflection=ctx.reflection_context or None,
        )
        return ctx.replace(generator_output=generator_output)
