"""CurateStep: generates playbook delta operations from a reflection."""

from __future__ import annotations

import json
from typing import Optional

from ..core.context import AdaptationContext
from ..core.environments import EnvironmentResult, Sample
from ..protocols import CuratorLike
from ..roles.helpers import format_optional


def format_progress(epoch: int, total_epochs: int, step: int, total_steps: int) -> str:
    """Progress annotation embedded in the curator prompt."""
    return f"epoch {epoch}/{total_epochs} · sample {step}/{total_steps}"


def format_question_context(
    sample: Sample, environment_result: Optional[EnvironmentResult]
) -> str:
    """``key: value`` lines describing the sample and its verdict.

    Order is fixed: question, context (only when the sample has one),
    metadata, feedback, ground truth.
    """
    feedback = environment_result.feedback if environment_result else None
    ground_truth = environment_result.ground_truth if environment_result else None
    parts = [f"question: {sample.question}"]
    if sample.context:
        parts.append(f"context: {sample.context}")
    parts.extend(
        [
            f"metadata: {json.dumps(sample.metadata, ensure_ascii=False, default=str)}",
            f"feedback: {format_optional(feedback)}",
            f"ground_truth: {format_optional(ground_truth)}",
        ]
    )
    return "\n".join(parts)


class CurateStep:
    """Run the Curator to produce a delta batch.

    Pure: reads the reflection and the current playbook view, does not
    mutate the playbook.
    """

    requires = frozenset({"sample", "reflection", "environment_result", "playbook"})
    provides = frozenset({"curator_output"})

    def __init__(self, curator: CuratorLike) -> None:
        self.curator = curator

    def __call__(self, ctx: AdaptationContext) -> AdaptationContext:
        output = self.curator.curate(
            reflection=ctx.reflection,
            playbook=ctx.playbook,
            question_context=format_question_context(ctx.sample, ctx.environment_result),
            progress=format_progress(
                ctx.epoch, ctx.total_epochs, ctx.step_index, ctx.total_steps
            ),
        )
        return ctx.replace(curator_output=output)
