"""Tests for Generator, Reflector and Curator driven by scripted replies."""

from __future__ import annotations

import json
import logging

import pytest

from ace_playbook import (
    Curator,
    DummyLLMClient,
    Generator,
    GeneratorOutput,
    Reflector,
    ReflectorOutput,
    StructuredOutputError,
)


def _reflection(**overrides):
    data = {
        "reasoning": "looked fine",
        "error_identification": "",
        "root_cause_analysis": "",
        "correct_approach": "",
        "key_insight": "",
        "bullet_tags": [],
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestGenerator:
    def test_parses_answer_and_bullet_ids(self, seeded_playbook):
        llm = DummyLLMClient(
            [{"reasoning": "r", "bullet_ids": ["math-00001"], "final_answer": "42"}]
        )
        out = Generator(llm).generate(
            question="Q?", context=None, playbook=seeded_playbook
        )
        assert out.final_answer == "42"
        assert out.bullet_ids == ["math-00001"]
        assert out.raw["reasoning"] == "r"

    def test_falls_back_to_ids_cited_in_reasoning(self, seeded_playbook):
        llm = DummyLLMClient(
            [
                {
                    "reasoning": "Per [math-00002] and [style-00001], then [math-00002].",
                    "final_answer": 7,
                }
            ]
        )
        out = Generator(llm).generate(question="Q", context="", playbook=seeded_playbook)
        assert out.bullet_ids == ["math-00002", "style-00001"]
        assert out.final_answer == "7"

    def test_prompt_contains_playbook_question_and_reflection(self, seeded_playbook):
        llm = DummyLLMClient([{"final_answer": "x"}])
        Generator(llm).generate(
            question="What is six times seven?",
            context="show work",
            playbook=seeded_playbook,
            reflection='{"key_insight": "multiply"}',
        )
        prompt = llm.prompts[0]
        assert "[math-00001] Check units before answering" in prompt
        assert "What is six times seven?" in prompt
        assert "show work" in prompt
        assert '"key_insight": "multiply"' in prompt

    def test_empty_playbook_and_missing_context_render_placeholders(self, playbook):
        llm = DummyLLMClient([{"final_answer": "x"}])
        Generator(llm).generate(question="Q", context=None, playbook=playbook)
        assert "(empty playbook)" in llm.prompts[0]
        assert "(none)" in llm.prompts[0]

    def test_gives_up_after_max_retries(self, playbook):
        llm = DummyLLMClient(["nope", "nope again"])
        with pytest.raises(StructuredOutputError) as excinfo:
            Generator(llm, max_retries=2).generate(
                question="Q", context=None, playbook=playbook
            )
        assert excinfo.value.role == "Generator"


# ---------------------------------------------------------------------------
# Reflector
# ---------------------------------------------------------------------------


@pytest.fixture
def attempt() -> GeneratorOutput:
    return GeneratorOutput(
        reasoning="Used [math-00001]", final_answer="41", bullet_ids=["math-00001"]
    )


@pytest.mark.unit
class TestReflector:
    def test_tags_are_lower_cased_and_malformed_entries_dropped(
        self, seeded_playbook, attempt
    ):
        llm = DummyLLMClient(
            [
                _reflection(
                    bullet_tags=[
                        {"id": "math-00001", "tag": "Helpful"},
                        {"id": "math-00002"},
                        "style-00001:harmful",
                    ]
                )
            ]
        )
        out = Reflector(llm).reflect(
            question="Q", generator_output=attempt, playbook=seeded_playbook
        )
        assert [(t.id, t.tag) for t in out.bullet_tags] == [("math-00001", "helpful")]
        assert not out.degraded

    def test_prompt_includes_excerpt_of_cited_bullets(self, seeded_playbook, attempt):
        llm = DummyLLMClient([_reflection(key_insight="k")])
        Reflector(llm).reflect(
            question="Q",
            generator_output=attempt,
            playbook=seeded_playbook,
            ground_truth="42",
            feedback="Incorrect. Expected: 42",
        )
        prompt = llm.prompts[0]
        assert "[math-00001] Check units before answering" in prompt
        assert "Prefer exact fractions" not in prompt
        assert "Incorrect. Expected: 42" in prompt

    def test_first_actionable_round_wins(self, seeded_playbook, attempt):
        llm = DummyLLMClient(
            [_reflection(), _reflection(key_insight="check units"), _reflection(key_insight="unused")]
        )
        out = Reflector(llm, max_refinement_rounds=3).reflect(
            question="Q", generator_output=attempt, playbook=seeded_playbook
        )
        assert out.key_insight == "check units"
        assert not out.degraded
        assert llm.remaining == 1
        assert [call["refinement_round"] for call in llm.calls] == [0, 1]

    def test_no_actionable_round_returns_degraded(self, seeded_playbook, attempt, caplog):
        llm = DummyLLMClient([_reflection(reasoning="first"), _reflection(reasoning="second")])
        with caplog.at_level(logging.WARNING):
            out = Reflector(llm, max_refinement_rounds=2).reflect(
                question="Q", generator_output=attempt, playbook=seeded_playbook
            )
        assert out.degraded
        assert out.reasoning == "second"
        assert "degraded" in caplog.text
        assert "degraded" not in out.model_dump()

    def test_failed_round_moves_on_to_next(self, seeded_playbook, attempt):
        llm = DummyLLMClient(["garbage", _reflection(key_insight="k")])
        out = Reflector(llm, max_retries=1, max_refinement_rounds=2).reflect(
            question="Q", generator_output=attempt, playbook=seeded_playbook
        )
        assert out.key_insight == "k"

    def test_all_rounds_unparseable_raises(self, seeded_playbook, attempt):
        llm = DummyLLMClient(["garbage 1", "garbage 2"])
        with pytest.raises(StructuredOutputError) as excinfo:
            Reflector(llm, max_retries=1, max_refinement_rounds=2).reflect(
                question="Q", generator_output=attempt, playbook=seeded_playbook
            )
        assert excinfo.value.last_text == "garbage 2"

    def test_call_level_rounds_override_default(self, seeded_playbook, attempt):
        llm = DummyLLMClient([_reflection(), _reflection()])
        out = Reflector(llm, max_refinement_rounds=5).reflect(
            question="Q",
            generator_output=attempt,
            playbook=seeded_playbook,
            max_refinement_rounds=1,
        )
        assert out.degraded
        assert llm.remaining == 1

    def test_rounds_below_one_rejected(self, seeded_playbook, attempt):
        with pytest.raises(ValueError):
            Reflector(DummyLLMClient()).reflect(
                question="Q",
                generator_output=attempt,
                playbook=seeded_playbook,
                max_refinement_rounds=0,
            )


# ---------------------------------------------------------------------------
# Curator
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestCurator:
    def test_builds_delta_from_reply(self, seeded_playbook):
        llm = DummyLLMClient(
            [
                {
                    "reasoning": "new lesson",
                    "operations": [
                        {"type": "ADD", "section": "math", "content": "Multiply carefully"},
                        {"type": "TAG", "bullet_id": "math-00001", "metadata": {"harmful": 1}},
                    ],
                }
            ]
        )
        reflection = ReflectorOutput(key_insight="multiply", raw={"key_insight": "multiply"})
        out = Curator(llm).curate(
            reflection=reflection,
            playbook=seeded_playbook,
            question_context="question: Q",
            progress="epoch 1/2 · sample 3/10",
        )
        assert out.delta.reasoning == "new lesson"
        assert [op.kind for op in out.delta.operations] == ["ADD", "TAG"]
        assert out.raw["reasoning"] == "new lesson"

        prompt = llm.prompts[0]
        assert "epoch 1/2 · sample 3/10" in prompt
        assert "question: Q" in prompt
        assert '"key_insight": "multiply"' in prompt
        assert json.dumps(seeded_playbook.stats()) in prompt

    def test_non_finite_metadata_drops_only_that_key(self, seeded_playbook):
        reply = (
            '{"reasoning": "r", "operations": ['
            '{"type": "TAG", "bullet_id": "math-00001", '
            '"metadata": {"helpful": Infinity, "neutral": 1}}]}'
        )
        llm = DummyLLMClient([reply])
        out = Curator(llm).curate(
            reflection=ReflectorOutput(),
            playbook=seeded_playbook,
            question_context="question: Q",
            progress="epoch 1/1 · sample 1/1",
        )
        assert llm.remaining == 0
        assert out.delta.operations[0].metadata == {"neutral": 1}
        assert any("is not numeric" in note for note in out.delta.diagnostics)

    def test_decode_issues_are_logged_not_fatal(self, playbook, caplog):
        llm = DummyLLMClient([{"reasoning": "r", "operations": ["ADD something"]}])
        with caplog.at_level(logging.WARNING):
            out = Curator(llm).curate(
                reflection=ReflectorOutput(),
                playbook=playbook,
                question_context="question: Q",
                progress="epoch 1/1 · sample 1/1",
            )
        assert out.delta.operations == []
        assert "decode issue" in caplog.text
