"""Pipeline: an ordered, validated, sequential step runner."""

from __future__ import annotations

import logging
from typing import Iterable

from .context import StepContext
from .errors import PipelineConfigError, PipelineOrderError
from .protocol import StepProtocol

logger = logging.getLogger(__name__)


def check_wiring(steps: list) -> tuple[frozenset, frozenset]:
    """Validate a step chain and return its ``(requires, provides)``.

    A field that some step in the chain writes must be written before any
    step reads it.  Fields no step writes are external inputs and end up in
    ``requires``.

    Raises:
        PipelineConfigError: A step lacks ``requires``/``provides``/``__call__``.
        PipelineOrderError: A step reads a field only a later step writes.
    """
    for step in steps:
        if not isinstance(step, StepProtocol):
            raise PipelineConfigError(
                f"{type(step).__name__} does not satisfy StepProtocol "
                "(needs requires, provides and __call__)."
            )

    written_anywhere = frozenset().union(*(step.provides for step in steps))
    written: set[str] = set()
    external: set[str] = set()
    for step in steps:
        reads = set(step.requires)
        too_early = (reads & written_anywhere) - written
        if too_early:
            raise PipelineOrderError(
                f"{type(step).__name__} reads {sorted(too_early)!r} before the "
                "step that writes them; reorder the pipeline."
            )
        external |= reads - written
        written |= set(step.provides)
    return frozenset(external), frozenset(written)


class Pipeline:
    """Ordered sequence of steps.  A Pipeline is itself a step, so it nests.

    Example::

        pipe = Pipeline([GenerateStep(generator), EvaluateStep(environment)])
        pipe.then(ReflectStep(reflector))
        ctx = pipe(ctx)

    Steps run one after another on the calling thread.  The first exception
    stops the run and propagates unchanged.
    """

    def __init__(self, steps: Iterable | None = None) -> None:
        self._steps: list = list(steps or [])
        self.requires, self.provides = check_wiring(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        names = ", ".join(type(step).__name__ for step in self._steps)
        return f"Pipeline([{names}])"

    @property
    def steps(self) -> tuple:
        return tuple(self._steps)

    def then(self, step: object) -> "Pipeline":
        """Append *step*; the pipeline is left untouched if wiring breaks."""
        candidate = [*self._steps, step]
        self.requires, self.provides = check_wiring(candidate)
        self._steps = candidate
        return self

    def __call__(self, ctx: StepContext) -> StepContext:
        for step in self._steps:
            try:
                ctx = step(ctx)
            except Exception:
                logger.error("Pipeline step %s failed", type(step).__name__)
                raise
        return ctx

    def run(self, contexts: Iterable[StepContext]) -> list[StepContext]:
        """Run each context through the pipeline in turn; stop at the first failure."""
        return [self(ctx) for ctx in contexts]
