"""Reflector: analyses an attempt to extract lessons and tag bullets."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, cast

from ..core.outputs import BulletTag, GeneratorOutput, ReflectorOutput
from ..errors import StructuredOutputError
from ..protocols.llm import LLMClientLike
from .helpers import as_text, format_optional, make_playbook_excerpt
from .prompts import REFLECTOR_PROMPT, REFLECTOR_RETRY_SUFFIX
from .structured import DEFAULT_MAX_RETRIES, generate_structured

logger = logging.getLogger(__name__)


def build_reflector_output(data: Dict[str, Any]) -> ReflectorOutput:
    """Map a decoded JSON reply onto ``ReflectorOutput``.

    Only ``bullet_tags`` entries that are objects with both ``id`` and
    ``tag`` are kept; tag names are lower-cased.
    """
    bullet_tags: List[BulletTag] = []
    tags_payload = data.get("bullet_tags") or []
    if isinstance(tags_payload, list):
        for item in tags_payload:
            if isinstance(item, dict) and "id" in item and "tag" in item:
                bullet_tags.append(
                    BulletTag(id=str(item["id"]), tag=str(item["tag"]).lower())
                )
    return ReflectorOutput(
        reasoning=as_text(data.get("reasoning")),
        error_identification=as_text(data.get("error_identification")),
        root_cause_analysis=as_text(data.get("root_cause_analysis")),
        correct_approach=as_text(data.get("correct_approach")),
        key_insight=as_text(data.get("key_insight")),
        bullet_tags=bullet_tags,
        raw=data,
    )


class Reflector:
    """Analyses generator outputs to find what helped and what hurt.

    Each refinement round runs the normal parse-retry cycle.  The first
    round whose reflection carries bullet tags or a key insight wins.  If
    rounds parse but none clears that bar, the last parsed reflection is
    returned with ``degraded=True``.  Only when no round parses at all does
    the call fail.

    Args:
        llm: An LLM client that satisfies :class:`LLMClientLike`.
        prompt_template: Custom prompt template (defaults to
            :data:`REFLECTOR_PROMPT`).
        max_retries: Attempts per round for a parseable JSON reply.
        max_refinement_rounds: Default number of rounds.

    Example::

        reflector = Reflector(llm)
        reflection = reflector.reflect(
            question="What is 2+2?",
            generator_output=generator_output,
            playbook=playbook,
            ground_truth="4",
            feedback="Correct!",
        )
        print(reflection.key_insight)
    """

    def __init__(
        self,
        llm: LLMClientLike,
        prompt_template: str = REFLECTOR_PROMPT,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_refinement_rounds: int = 1,
    ) -> None:
        self.llm = llm
        self.prompt_template = prompt_template
        self.max_retries = max_retries
        self.max_refinement_rounds = max_refinement_rounds

    def build_prompt(
        self,
        *,
        question: str,
        generator_output: GeneratorOutput,
        playbook: Any,
        ground_truth: Optional[str] = None,
        feedback: Optional[str] = None,
    ) -> str:
        excerpt = make_playbook_excerpt(playbook, generator_output.bullet_ids)
        return self.prompt_template.format(
            question=question,
            reasoning=generator_output.reasoning,
            prediction=generator_output.final_answer,
            ground_truth=format_optional(ground_truth),
            feedback=format_optional(feedback),
            playbook_excerpt=excerpt or "(no bullets referenced)",
        )

    def reflect(
        self,
        *,
        question: str,
        generator_output: GeneratorOutput,
        playbook: Any,
        ground_truth: Optional[str] = None,
        feedback: Optional[str] = None,
        max_refinement_rounds: Optional[int] = None,
        **kwargs: Any,
    ) -> ReflectorOutput:
        """Analyse an attempt and classify the bullets it used.

        This method signature matches :class:`ReflectorLike`.

        Raises:
            StructuredOutputError: No refinement round produced a JSON object.
        """
        rounds = (
            max_refinement_rounds
            if max_refinement_rounds is not None
            else self.max_refinement_rounds
        )
        if rounds < 1:
            raise ValueError("max_refinement_rounds must be >= 1")

        base_prompt = self.build_prompt(
            question=question,
            generator_output=generator_output,
            playbook=playbook,
            ground_truth=ground_truth,
            feedback=feedback,
        )

        result: Optional[ReflectorOutput] = None
        last_failure: Optional[StructuredOutputError] = None

        for round_idx in range(rounds):
            try:
                candidate = generate_structured(
                    self.llm,
                    base_prompt,
                    build_reflector_output,
                    role="Reflector",
                    max_retries=self.max_retries,
                    corrective_suffix=REFLECTOR_RETRY_SUFFIX,
                    refinement_round=round_idx,
                    **kwargs,
                )
            except StructuredOutputError as err:
                last_failure = err
                logger.warning(
                    "Reflector round %d/%d produced no JSON", round_idx + 1, rounds
                )
                continue

            result = candidate
            if candidate.is_actionable:
                return candidate

        if result is None:
            # rounds >= 1, so every round failed and last_failure is set
            raise cast(StructuredOutputError, last_failure)

        logger.warning(
            "Reflector: no round yielded bullet tags or a key insight; "
            "returning degraded reflection"
        )
        return result.model_copy(update={"degraded": True})
