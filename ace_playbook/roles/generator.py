"""Generator: answers a task using the current playbook."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..core.outputs import GeneratorOutput
from ..protocols.llm import LLMClientLike
from .helpers import as_text, extract_cited_bullet_ids, format_optional
from .prompts import GENERATOR_PROMPT, GENERATOR_RETRY_SUFFIX
from .structured import DEFAULT_MAX_RETRIES, generate_structured

logger = logging.getLogger(__name__)


def build_generator_output(data: Dict[str, Any]) -> GeneratorOutput:
    """Map a decoded JSON reply onto ``GeneratorOutput``.

    Missing fields fall back to empty values.  When the reply has no
    ``bullet_ids`` list, IDs cited inline in the reasoning are used.
    """
    reasoning = as_text(data.get("reasoning"))
    ids_payload = data.get("bullet_ids")
    if isinstance(ids_payload, list):
        bullet_ids = [str(item) for item in ids_payload]
    else:
        bullet_ids = extract_cited_bullet_ids(reasoning)
    return GeneratorOutput(
        reasoning=reasoning,
        final_answer=as_text(data.get("final_answer")),
        bullet_ids=bullet_ids,
        raw=data,
    )


class Generator:
    """Produces answers using the current playbook of advice.

    Args:
        llm: An LLM client that satisfies :class:`LLMClientLike`.
        prompt_template: Custom prompt template (defaults to
            :data:`GENERATOR_PROMPT`).
        max_retries: Attempts allowed for a parseable JSON reply.

    Example::

        generator = Generator(llm)
        output = generator.generate(
            question="What is the capital of France?",
            context="Answer concisely",
            playbook=playbook,
        )
        print(output.final_answer)  # "Paris"
    """

    def __init__(
        self,
        llm: LLMClientLike,
        prompt_template: str = GENERATOR_PROMPT,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self.llm = llm
        self.prompt_template = prompt_template
        self.max_retries = max_retries

    def build_prompt(
        self,
        *,
        question: str,
        context: Optional[str],
        playbook: Any,
        reflection: Optional[str] = None,
    ) -> str:
        return self.prompt_template.format(
            playbook=playbook.as_prompt() or "(empty playbook)",
            reflection=format_optional(reflection),
            question=question,
            context=format_optional(context),
        )

    def generate(
        self,
        *,
        question: str,
        context: Optional[str],
        playbook: Any,
        reflection: Optional[str] = None,
        **kwargs: Any,
    ) -> GeneratorOutput:
        """Generate an answer using playbook advice.

        This method signature matches :class:`GeneratorLike`.

        Args:
            question: The question to answer.
            context: Additional context or requirements.
            playbook: Current playbook (duck-typed, needs ``as_prompt``).
            reflection: Serialized recent reflections, if any.
            **kwargs: Forwarded to the LLM client.

        Raises:
            StructuredOutputError: No attempt produced a JSON object.
        """
        prompt = self.build_prompt(
            question=question,
            context=context,
            playbook=playbook,
            reflection=reflection,
        )
        return generate_structured(
            self.llm,
            prompt,
            build_generator_output,
            role="Generator",
            max_retries=self.max_retries,
            corrective_suffix=GENERATOR_RETRY_SUFFIX,
            **kwargs,
        )
