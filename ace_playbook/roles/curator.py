"""Curator: turns reflections into playbook deltas."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from ..core.delta import DeltaBatch
from ..core.outputs import CuratorOutput, ReflectorOutput
from ..protocols.llm import LLMClientLike
from .prompts import CURATOR_PROMPT, CURATOR_RETRY_SUFFIX
from .structured import DEFAULT_MAX_RETRIES, generate_structured

logger = logging.getLogger(__name__)


def build_curator_output(data: Dict[str, Any]) -> CuratorOutput:
    delta = DeltaBatch.from_json(data)
    if delta.diagnostics:
        logger.warning(
            "Curator delta had %d decode issue(s): %s",
            len(delta.diagnostics),
            "; ".join(delta.diagnostics),
        )
    return CuratorOutput(delta=delta, raw=data)


class Curator:
    """Transforms reflections into playbook delta operations.

    The Curator reads the Reflector's analysis plus the current playbook
    and decides what to ADD, UPDATE, TAG or REMOVE.  It only produces a
    :class:`CuratorOutput`; applying the delta is the caller's job.

    Args:
        llm: An LLM client that satisfies :class:`LLMClientLike`.
        prompt_template: Custom prompt template (defaults to
            :data:`CURATOR_PROMPT`).
        max_retries: Attempts allowed for a parseable JSON reply.

    Example::

        curator = Curator(llm)
        output = curator.curate(
            reflection=reflection,
            playbook=playbook,
            question_context="question: What is 2+2?",
            progress="epoch 1/1 · sample 3/10",
        )
        playbook.apply_delta(output.delta)
    """

    def __init__(
        self,
        llm: LLMClientLike,
        prompt_template: str = CURATOR_PROMPT,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self.llm = llm
        self.prompt_template = prompt_template
        self.max_retries = max_retries

    def build_prompt(
        self,
        *,
        reflection: ReflectorOutput,
        playbook: Any,
        question_context: str,
        progress: str,
    ) -> str:
        reflection_data = reflection.raw or reflection.model_dump(exclude={"raw"})
        return self.prompt_template.format(
            progress=progress,
            stats=json.dumps(playbook.stats()),
            reflection=json.dumps(reflection_data, ensure_ascii=False, indent=2),
            playbook=playbook.as_prompt() or "(empty playbook)",
            question_context=question_context,
        )

    def curate(
        self,
        *,
        reflection: ReflectorOutput,
        playbook: Any,
        question_context: str,
        progress: str,
        **kwargs: Any,
    ) -> CuratorOutput:
        """Generate delta operations based on the reflection.

        This method signature matches :class:`CuratorLike`.

        Args:
            reflection: The Reflector's analysis.
            playbook: Current playbook (duck-typed, needs ``as_prompt``
                and ``stats``).
            question_context: ``key: value`` lines describing the sample.
            progress: Progress annotation, e.g. ``epoch 1/2 · sample 3/10``.
            **kwargs: Forwarded to the LLM client.

        Raises:
            StructuredOutputError: No attempt produced a JSON object.
        """
        prompt = self.build_prompt(
            reflection=reflection,
            playbook=playbook,
            question_context=question_context,
            progress=progress,
        )
        return generate_structured(
            self.llm,
            prompt,
            build_curator_output,
            role="Curator",
            max_retries=self.max_retries,
            corrective_suffix=CURATOR_RETRY_SUFFIX,
            **kwargs,
        )
