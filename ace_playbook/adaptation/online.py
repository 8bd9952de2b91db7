"""OnlineAdapter: single pass, one step per incoming sample."""

from __future__ import annotations

from collections.abc import Iterable

from ..core.environments import Sample, TaskEnvironment
from .base import AdapterBase, AdapterStepResult


class OnlineAdapter(AdapterBase):
    """Consume each sample exactly once, with no look-ahead.

    Every sample is its own epoch 1 of 1, and its step and total-step
    fields both equal its 1-based position, so *samples* may be an
    unbounded iterator.
    """

    def run(
        self,
        samples: Iterable[Sample],
        environment: TaskEnvironment,
    ) -> list[AdapterStepResult]:
        self._stop_requested = False
        pipeline = self.build_pipeline(environment)
        results: list[AdapterStepResult] = []

        for step_index, sample in enumerate(samples, start=1):
            results.append(
                self._process_sample(
                    pipeline,
                    sample,
                    epoch=1,
                    total_epochs=1,
                    step_index=step_index,
                    total_steps=step_index,
                    global_sample_index=step_index,
                )
            )
            # Checked after the step so no further sample is pulled from the iterator
            if self._should_stop():
                break
        return results
