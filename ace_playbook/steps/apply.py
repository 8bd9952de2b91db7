"""ApplyStep: applies the curated delta to the playbook."""

from __future__ import annotations

import logging

from ..core.context import AdaptationContext
from ..core.playbook import Playbook

logger = logging.getLogger(__name__)


class ApplyStep:
    """Apply the curator's delta batch to the real Playbook.

    Side-effect step: mutates ``self.playbook`` (injected via constructor).
    Separated from CurateStep so curation can be tested without mutating
    a playbook.
    """

    requires = frozenset({"curator_output"})
    provides = frozenset({"apply_report"})

    def __init__(self, playbook: Playbook) -> None:
        self.playbook = playbook

    def __call__(self, ctx: AdaptationContext) -> AdaptationContext:
        report = self.playbook.apply_delta(ctx.curator_output.delta)
        logger.info(
            "ApplyStep: applied %d operation(s), skipped %d",
            report.applied,
            len(report.skipped),
        )
        return ctx.replace(apply_report=report)
