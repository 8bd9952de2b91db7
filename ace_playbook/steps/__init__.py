"""Adaptation pipeline steps: one class per file, plus the learning_tail helper."""

from __future__ import annotations

from pathlib import Path

from pipeline import StepProtocol

from ..core.context import ReflectionWindow
from ..core.playbook import Playbook
from ..protocols import CuratorLike, ReflectorLike
from .apply import ApplyStep
from .checkpoint import CheckpointStep
from .curate import CurateStep, format_progress, format_question_context
from .evaluate import EvaluateStep
from .generate import GenerateStep
from .reflect import ReflectStep
from .remember import RememberStep
from .tag import TagStep

__all__ = [
    "ApplyStep",
    "CheckpointStep",
    "CurateStep",
    "EvaluateStep",
    "GenerateStep",
    "ReflectStep",
    "RememberStep",
    "TagStep",
    "format_progress",
    "format_question_context",
    "learning_tail",
]


def learning_tail(
    reflector: ReflectorLike,
    curator: CuratorLike,
    playbook: Playbook,
    window: ReflectionWindow,
    *,
    max_refinement_rounds: int = 1,
    checkpoint_dir: str | Path | None = None,
    checkpoint_interval: int = 10,
) -> list[StepProtocol]:
    """Return the standard learning steps that follow generate + evaluate.

    The returned list is always:
        [ReflectStep, TagStep, RememberStep, CurateStep, ApplyStep]
    with a CheckpointStep appended when *checkpoint_dir* is given.
    """
    steps: list[StepProtocol] = [
        ReflectStep(reflector, max_refinement_rounds=max_refinement_rounds),
        TagStep(playbook),
        RememberStep(window),
        CurateStep(curator),
        ApplyStep(playbook),
    ]
    if checkpoint_dir:
        steps.append(
            CheckpointStep(checkpoint_dir, playbook, interval=checkpoint_interval)
        )
    return steps
