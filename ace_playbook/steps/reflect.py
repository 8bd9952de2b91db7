"""ReflectStep: analyses the attempt to produce a ReflectorOutput."""

from __future__ import annotations

from ..core.context import AdaptationContext
from ..protocols import ReflectorLike


class ReflectStep:
    """Run the Reflector against the attempt, its verdict and the playbook.

    Pure: produces a reflection object, no side effects.
    """

    requires = frozenset({"sample", "generator_output", "environment_result", "playbook"})
    provides = frozenset({"reflection"})

    def __init__(self, reflector: ReflectorLike, *, max_refinement_rounds: int = 1) -> None:
        self.reflector = reflector
        self.max_refinement_rounds = max_refinement_rounds

    def __call__(self, ctx: AdaptationContext) -> AdaptationContext:
        result = ctx.environment_result
        reflection = self.reflector.reflect(
            question=ctx.sample.question,
            generator_output=ctx.generator_output,
            playbook=ctx.playbook,
            ground_truth=result.ground_truth,
            feedback=result.feedback,
            max_refinement_rounds=self.max_refinement_rounds,
        )
        return ctx.replace(reflection=reflection)
