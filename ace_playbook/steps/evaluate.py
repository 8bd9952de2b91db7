"""EvaluateStep: scores the attempt with the task environment."""

from __future__ import annotations

from ..core.context import AdaptationContext
from ..core.environments import TaskEnvironment


class EvaluateStep:
    """Call the environment once per sample and store its verdict.

    The environment is injected at construction time, not carried on the
    context.
    """

    requires = frozenset({"sample", "generator_output"})
    provides = frozenset({"environment_result"})

    def __init__(self, environment: TaskEnvironment) -> None:
        self.environment = environment

    def __call__(self, ctx: AdaptationContext) -> AdaptationContext:
        result = self.environment.evaluate(ctx.sample, ctx.generator_output)
        return ctx.replace(environment_result=result)
