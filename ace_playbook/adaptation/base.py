"""AdapterBase: shared per-sample machinery for the offline and online loops."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pipeline import Pipeline

from ..config import AdaptationConfig
from ..core.context import AdaptationContext, PlaybookView, ReflectionWindow
from ..core.environments import EnvironmentResult, Sample, TaskEnvironment
from ..core.outputs import CuratorOutput, GeneratorOutput, ReflectorOutput
from ..core.playbook import DeltaApplyReport, Playbook
from ..protocols import CuratorLike, GeneratorLike, LLMClientLike, ReflectorLike
from ..roles import Curator, Generator, Reflector
from ..steps import EvaluateStep, GenerateStep, learning_tail

logger = logging.getLogger(__name__)


@dataclass
class AdapterStepResult:
    """Everything one adaptation step saw and produced."""

    sample: Sample
    generator_output: GeneratorOutput
    environment_result: EnvironmentResult
    reflection: ReflectorOutput
    curator_output: CuratorOutput
    playbook_snapshot: str
    epoch: int = 1
    total_epochs: int = 1
    step_index: int = 0
    total_steps: int = 0
    apply_report: Optional[DeltaApplyReport] = None


class AdapterBase:
    """Runs generate → evaluate → reflect → tag → remember → curate → apply.

    Owns the playbook and the rolling reflection window.  Steps run one
    sample at a time on the calling thread; a failure in any step aborts
    that sample and propagates to the caller, so no partial step result is
    ever recorded.  One adapter must be the only writer of its playbook.

    Subclasses implement ``run()`` and decide the iteration policy.
    """

    def __init__(
        self,
        generator: GeneratorLike,
        reflector: ReflectorLike,
        curator: CuratorLike,
        playbook: Optional[Playbook] = None,
        *,
        max_refinement_rounds: int = 1,
        reflection_window: int = 3,
        checkpoint_dir: str | Path | None = None,
        checkpoint_interval: int = 10,
        epochs: int = 1,
    ) -> None:
        self.generator = generator
        self.reflector = reflector
        self.curator = curator
        self.playbook = playbook if playbook is not None else Playbook()
        self.max_refinement_rounds = max_refinement_rounds
        self.window = ReflectionWindow(reflection_window)
        self.checkpoint_dir = checkpoint_dir
        self.checkpoint_interval = checkpoint_interval
        # Default pass count for OfflineAdapter.run
        self.epochs = epochs
        self._stop_requested = False

    @classmethod
    def from_config(
        cls,
        llm: LLMClientLike,
        config: Optional[AdaptationConfig] = None,
        playbook: Optional[Playbook] = None,
    ):
        """Build all three roles on one LLM client from an ``AdaptationConfig``."""
        config = config or AdaptationConfig()
        return cls(
            Generator(llm, max_retries=config.max_retries),
            Reflector(llm, max_retries=config.max_retries),
            Curator(llm, max_retries=config.max_retries),
            playbook,
            max_refinement_rounds=config.max_refinement_rounds,
            reflection_window=config.reflection_window,
            checkpoint_dir=config.checkpoint_dir,
            checkpoint_interval=config.checkpoint_interval,
            epochs=config.epochs,
        )

    # ------------------------------------------------------------------
    # Lifecycle helpers
    # ------------------------------------------------------------------

    def request_stop(self) -> None:
        """Stop the current ``run()`` before its next sample starts."""
        self._stop_requested = True

    def save(self, path: str | Path) -> None:
        """Save the current playbook to disk."""
        self.playbook.save_to_file(path)

    @property
    def reflection_context(self) -> str:
        return self.window.as_context()

    # ------------------------------------------------------------------
    # Per-sample machinery
    # ------------------------------------------------------------------

    def build_pipeline(self, environment: TaskEnvironment) -> Pipeline:
        return Pipeline(
            [
                GenerateStep(self.generator),
                EvaluateStep(environment),
                *learning_tail(
                    self.reflector,
                    self.curator,
                    self.playbook,
                    self.window,
                    max_refinement_rounds=self.max_refinement_rounds,
                    checkpoint_dir=self.checkpoint_dir,
                    checkpoint_interval=self.checkpoint_interval,
                ),
            ]
        )

    def _should_stop(self) -> bool:
        if self._stop_requested:
            logger.info("Stop requested; ending run at sample boundary")
            return True
        return False

    def _process_sample(
        self,
        pipeline: Pipeline,
        sample: Sample,
        *,
        epoch: int,
        total_epochs: int,
        step_index: int,
        total_steps: int,
        global_sample_index: int,
    ) -> AdapterStepResult:
        ctx = AdaptationContext(
            sample=sample,
            playbook=PlaybookView(self.playbook),
            reflection_context=self.window.as_context(),
            epoch=epoch,
            total_epochs=total_epochs,
            step_index=step_index,
            total_steps=total_steps,
            global_sample_index=global_sample_index,
        )
        ctx = pipeline(ctx)

        stats = self.playbook.stats()
        logger.info(
            "epoch %d/%d · sample %d/%d done: %d bullet(s) in %d section(s)",
            epoch,
            total_epochs,
            step_index,
            total_steps,
            stats["bullets"],
            stats["sections"],
        )
        return AdapterStepResult(
            sample=sample,
            generator_output=ctx.generator_output,
            environment_result=ctx.environment_result,
            reflection=ctx.reflection,
            curator_output=ctx.curator_output,
            playbook_snapshot=self.playbook.as_prompt(),
            epoch=epoch,
            total_epochs=total_epochs,
            step_index=step_index,
            total_steps=total_steps,
            apply_report=ctx.apply_report,
        )
