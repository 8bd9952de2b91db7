"""OfflineAdapter: multi-epoch training over a fixed sample sequence."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from ..core.environments import Sample, TaskEnvironment
from .base import AdapterBase, AdapterStepResult


class OfflineAdapter(AdapterBase):
    """Repeat the full sample sequence for a number of epochs.

    Produces one ``AdapterStepResult`` per (epoch, sample) pair in
    epoch-major, sample-minor order.
    """

    def run(
        self,
        samples: Sequence[Sample],
        environment: TaskEnvironment,
        epochs: Optional[int] = None,
    ) -> list[AdapterStepResult]:
        """Run the adaptation loop over *samples* for *epochs* passes.

        *epochs* defaults to the adapter's configured ``epochs``.

        Raises:
            ValueError: *epochs* is below 1 or *samples* is not a Sequence.
        """
        if epochs is None:
            epochs = self.epochs
        if epochs < 1:
            raise ValueError("epochs must be >= 1")
        if not isinstance(samples, Sequence):
            raise ValueError(
                "OfflineAdapter needs a Sequence of samples; "
                "use OnlineAdapter for a one-shot Iterable."
            )

        self._stop_requested = False
        pipeline = self.build_pipeline(environment)
        results: list[AdapterStepResult] = []
        total_steps = len(samples)

        for epoch in range(1, epochs + 1):
            for step_index, sample in enumerate(samples, start=1):
                if self._should_stop():
                    return results
                results.append(
                    self._process_sample(
                        pipeline,
                        sample,
                        epoch=epoch,
                        total_epochs=epochs,
                        step_index=step_index,
                        total_steps=total_steps,
                        global_sample_index=(epoch - 1) * total_steps + step_index,
                    )
                )
        return results
