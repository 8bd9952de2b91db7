"""Core types for the adaptation pipeline: PlaybookView, ReflectionWindow, AdaptationContext."""

from __future__ import annotations

import json
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Iterator

from pipeline import StepContext

from .delta import DeltaBatch
from .environments import EnvironmentResult
from .outputs import CuratorOutput, GeneratorOutput, ReflectorOutput
from .playbook import Bullet, DeltaApplyReport, Playbook


# ---------------------------------------------------------------------------
# PlaybookView: read-only projection
# ---------------------------------------------------------------------------


class PlaybookView:
    """Read-only projection of a Playbook.

    Wraps a ``Playbook`` and exposes only read methods.  Safe to place on a
    frozen ``AdaptationContext``; steps that need to write receive the real
    ``Playbook`` via constructor injection.
    """

    __slots__ = ("_pb",)

    def __init__(self, playbook: Playbook) -> None:
        self._pb = playbook

    def as_prompt(self) -> str:
        return self._pb.as_prompt()

    def get_bullet(self, bullet_id: str) -> Bullet | None:
        return self._pb.get_bullet(bullet_id)

    def bullets(self) -> list[Bullet]:
        return self._pb.bullets()

    def stats(self) -> dict[str, Any]:
        return self._pb.stats()

    def __len__(self) -> int:
        return len(self._pb)

    def __iter__(self) -> Iterator[Bullet]:
        return iter(self._pb.bullets())

    def __repr__(self) -> str:
        return f"PlaybookView({len(self)} bullets)"


# ---------------------------------------------------------------------------
# ReflectionWindow: bounded rolling window of serialized reflections
# ---------------------------------------------------------------------------


class ReflectionWindow:
    """Keeps the last *size* reflections, serialized, for generator prompts."""

    separator = "\n---\n"

    def __init__(self, size: int = 3) -> None:
        if size < 0:
            raise ValueError(f"Reflection window size must be >= 0, got {size}")
        self.size = size
        self._items: Deque[str] = deque(maxlen=size)

    def push(self, reflection: ReflectorOutput) -> None:
        self._items.append(json.dumps(reflection.raw, ensure_ascii=False))

    def as_context(self) -> str:
        return self.separator.join(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))


# ---------------------------------------------------------------------------
# AdaptationContext: immutable context for one adaptation step
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AdaptationContext(StepContext):
    """Immutable context carrying step-to-step data for one sample.

    ``playbook`` is a ``PlaybookView``; ``reflection_context`` is the
    rolling-window text captured when the step started.
    """

    # -- Inputs --
    playbook: PlaybookView | None = None
    reflection_context: str = ""

    # -- Role outputs --
    generator_output: GeneratorOutput | None = None
    environment_result: EnvironmentResult | None = None
    reflection: ReflectorOutput | None = None
    curator_output: CuratorOutput | None = None
    apply_report: DeltaApplyReport | None = None

    # -- Progress tracking --
    epoch: int = 1
    total_epochs: int = 1
    step_index: int = 0
    total_steps: int = 0
    global_sample_index: int = 0

    @property
    def delta(self) -> DeltaBatch | None:
        return self.curator_output.delta if self.curator_output else None
