"""CheckpointStep: periodically saves the playbook to disk."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.context import AdaptationContext
from ..core.playbook import Playbook

logger = logging.getLogger(__name__)


class CheckpointStep:
    """Save the playbook every *interval* samples.

    Uses ``ctx.global_sample_index`` (1-based) for interval logic.  Writes
    a numbered snapshot and overwrites ``latest.json``.
    """

    requires = frozenset({"global_sample_index"})
    provides = frozenset()

    def __init__(
        self,
        directory: str | Path,
        playbook: Playbook,
        *,
        interval: int = 10,
    ) -> None:
        if interval < 1:
            raise ValueError(f"Checkpoint interval must be >= 1, got {interval}")
        self.directory = Path(directory)
        self.playbook = playbook
        self.interval = interval

    def __call__(self, ctx: AdaptationContext) -> AdaptationContext:
        if ctx.global_sample_index % self.interval != 0:
            return ctx

        numbered = self.directory / f"checkpoint_{ctx.global_sample_index}.json"
        self.playbook.save_to_file(numbered)
        self.playbook.save_to_file(self.directory / "latest.json")

        logger.info(
            "CheckpointStep: saved checkpoint at sample %d → %s",
            ctx.global_sample_index,
            numbered,
        )
        return ctx
