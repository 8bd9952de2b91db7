"""TagStep: applies bullet tags from the reflection to the playbook."""

from __future__ import annotations

import logging

from ..core.context import AdaptationContext
from ..core.playbook import Playbook

logger = logging.getLogger(__name__)


class TagStep:
    """Bump bullet counters on the real Playbook from ``reflection.bullet_tags``.

    Side-effect step: mutates ``self.playbook`` (injected via constructor).
    Hallucinated bullet IDs and unsupported tag names are logged at WARNING
    and skipped.
    """

    requires = frozenset({"reflection"})
    provides = frozenset()

    def __init__(self, playbook: Playbook) -> None:
        self.playbook = playbook

    def __call__(self, ctx: AdaptationContext) -> AdaptationContext:
        for bullet_tag in ctx.reflection.bullet_tags:
            try:
                bullet = self.playbook.tag_bullet(bullet_tag.id, bullet_tag.tag)
            except ValueError:
                logger.warning(
                    "TagStep: unsupported tag %r for bullet %r, skipping",
                    bullet_tag.tag,
                    bullet_tag.id,
                )
                continue
            if bullet is None:
                logger.warning(
                    "TagStep: bullet_id %r not found, skipping tag %r",
                    bullet_tag.id,
                    bullet_tag.tag,
                )
        return ctx
