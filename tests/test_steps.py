"""Unit tests for individual adaptation steps and their context types."""

from __future__ import annotations

import json

import pytest

from ace_playbook import (
    AdaptationContext,
    BulletTag,
    Curator,
    CuratorOutput,
    DeltaBatch,
    DeltaOperation,
    DummyLLMClient,
    EnvironmentResult,
    Generator,
    GeneratorOutput,
    OfflineAdapter,
    PlaybookView,
    ReflectionWindow,
    Reflector,
    ReflectorOutput,
    Sample,
)
from ace_playbook.steps import (
    ApplyStep,
    CheckpointStep,
    TagStep,
    format_progress,
    format_question_context,
    learning_tail,
)


# ---------------------------------------------------------------------------
# Context types
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestPlaybookView:
    def test_exposes_reads_only(self, seeded_playbook):
        view = PlaybookView(seeded_playbook)
        assert len(view) == 3
        assert view.get_bullet("math-00001").content == "Check units before answering"
        assert view.as_prompt() == seeded_playbook.as_prompt()
        assert not hasattr(view, "add_bullet")
        assert not hasattr(view, "apply_delta")

    def test_reflects_later_writes(self, playbook):
        view = PlaybookView(playbook)
        playbook.add_bullet("s", "c")
        assert len(view) == 1


@pytest.mark.unit
class TestReflectionWindow:
    def test_evicts_oldest(self):
        window = ReflectionWindow(2)
        for i in range(3):
            window.push(ReflectorOutput(raw={"n": i}))
        assert [json.loads(item)["n"] for item in window] == [1, 2]
        assert window.as_context() == '{"n": 1}\n---\n{"n": 2}'

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            ReflectionWindow(-1)

    def test_clear(self):
        window = ReflectionWindow()
        window.push(ReflectorOutput(raw={"n": 1}))
        window.clear()
        assert len(window) == 0
        assert window.as_context() == ""


@pytest.mark.unit
class TestSimpleEnvironment:
    def test_containment_is_case_insensitive(self, environment, sample):
        result = environment.evaluate(sample, GeneratorOutput(final_answer="The answer is 42."))
        assert result.feedback == "Correct!"
        assert result.metrics == {"correct": 1.0}

    def test_incorrect_names_expected_answer(self, environment, sample):
        result = environment.evaluate(sample, GeneratorOutput(final_answer="41"))
        assert result.feedback == "Incorrect. Expected: 42"
        assert result.ground_truth == "42"

    def test_missing_ground_truth(self, environment):
        result = environment.evaluate(Sample(question="q"), GeneratorOutput(final_answer="x"))
        assert result.ground_truth is None
        assert result.metrics == {"correct": 0.0}


# ---------------------------------------------------------------------------
# Prompt formatting
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestCuratorFormatting:
    def test_progress(self):
        assert format_progress(2, 3, 4, 10) == "epoch 2/3 · sample 4/10"

    def test_question_context_full(self):
        sample = Sample(question="Q?", context="ctx", metadata={"source": "unit"})
        verdict = EnvironmentResult(feedback="Correct!", ground_truth="42")
        assert format_question_context(sample, verdict) == (
            "question: Q?\n"
            "context: ctx\n"
            'metadata: {"source": "unit"}\n'
            "feedback: Correct!\n"
            "ground_truth: 42"
        )

    def test_question_context_without_context_or_verdict(self):
        text = format_question_context(Sample(question="Q?"), None)
        assert text == "question: Q?\nmetadata: {}\nfeedback: (none)\nground_truth: (none)"


# ---------------------------------------------------------------------------
# Side-effect steps
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestSideEffectSteps:
    def test_tag_step_skips_unknown_ids_and_tags(self, seeded_playbook):
        reflection = ReflectorOutput(
            bullet_tags=[
                BulletTag(id="math-00001", tag="harmful"),
                BulletTag(id="ghost", tag="helpful"),
                BulletTag(id="math-00002", tag="great"),
            ]
        )
        ctx = AdaptationContext(reflection=reflection)
        assert TagStep(seeded_playbook)(ctx) is ctx
        assert seeded_playbook.get_bullet("math-00001").harmful == 1
        assert seeded_playbook.stats()["tags"] == {"helpful": 0, "harmful": 1, "neutral": 0}

    def test_apply_step_records_report(self, playbook):
        delta = DeltaBatch(
            operations=[
                DeltaOperation(type="ADD", section="s", content="c"),
                DeltaOperation(type="REMOVE", bullet_id="ghost"),
            ]
        )
        ctx = AdaptationContext(curator_output=CuratorOutput(delta=delta))
        out = ApplyStep(playbook)(ctx)
        assert out.apply_report.applied == 1
        assert len(out.apply_report.skipped) == 1
        assert out.delta is delta
        assert len(playbook) == 1

    def test_checkpoint_step_respects_interval(self, seeded_playbook, tmp_path):
        step = CheckpointStep(tmp_path, seeded_playbook, interval=3)
        step(AdaptationContext(global_sample_index=2))
        assert list(tmp_path.iterdir()) == []
        step(AdaptationContext(global_sample_index=3))
        assert (tmp_path / "checkpoint_3.json").exists()
        assert (tmp_path / "latest.json").exists()

    @pytest.mark.parametrize("interval", [0, -5])
    def test_checkpoint_step_rejects_non_positive_interval(
        self, playbook, tmp_path, interval
    ):
        with pytest.raises(ValueError, match="interval"):
            CheckpointStep(tmp_path, playbook, interval=interval)

    def test_adapter_with_zero_interval_fails_before_any_call(
        self, playbook, environment, sample, tmp_path
    ):
        llm = DummyLLMClient()
        adapter = OfflineAdapter(
            Generator(llm),
            Reflector(llm),
            Curator(llm),
            playbook,
            checkpoint_dir=tmp_path,
            checkpoint_interval=0,
        )
        with pytest.raises(ValueError, match="interval"):
            adapter.run([sample], environment)
        assert llm.prompts == []


@pytest.mark.unit
class TestLearningTail:
    def test_step_order(self, playbook):
        names = [
            type(step).__name__
            for step in learning_tail(object(), object(), playbook, ReflectionWindow())
        ]
        assert names == ["ReflectStep", "TagStep", "RememberStep", "CurateStep", "ApplyStep"]

    def test_checkpoint_appended_when_directory_given(self, playbook, tmp_path):
        steps = learning_tail(
            object(), object(), playbook, ReflectionWindow(), checkpoint_dir=tmp_path
        )
        assert type(steps[-1]).__name__ == "CheckpointStep"
