"""Tests for LLMConfig / AdaptationConfig validation and environment loading."""

from __future__ import annotations

import os

import pytest

from ace_playbook import AdaptationConfig, LLMConfig


@pytest.fixture
def ace_env(monkeypatch):
    """Start without ACE_* variables and drop any a .env file added."""
    for key in [k for k in os.environ if k.startswith("ACE_")]:
        monkeypatch.delenv(key)
    yield monkeypatch
    for key in [k for k in os.environ if k.startswith("ACE_")]:
        os.environ.pop(key)


@pytest.mark.unit
class TestLLMConfig:
    def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError, match="Unknown LLM backend"):
            LLMConfig(backend="carrier-pigeon", model="m")  # type: ignore[arg-type]

    def test_model_required_outside_dummy(self):
        with pytest.raises(ValueError, match="requires a model"):
            LLMConfig(backend="litellm")
        assert LLMConfig(backend="dummy").model is None

    def test_from_env(self, ace_env, tmp_path):
        ace_env.setenv("ACE_MODEL", "gpt-4o-mini")
        ace_env.setenv("ACE_TEMPERATURE", "0.3")
        ace_env.setenv("ACE_MAX_TOKENS", "512")
        config = LLMConfig.from_env(env_file=str(tmp_path / "missing.env"))
        assert config.backend == "litellm"
        assert config.model == "gpt-4o-mini"
        assert config.temperature == 0.3
        assert config.max_tokens == 512
        assert config.api_key is None

    def test_from_env_reads_dotenv_file(self, ace_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ACE_LLM_BACKEND=dummy\nACE_TIMEOUT=5\n")
        config = LLMConfig.from_env(env_file=str(env_file))
        assert config.backend == "dummy"
        assert config.timeout == 5

    def test_process_env_wins_over_dotenv(self, ace_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ACE_LLM_BACKEND=dummy\nACE_MAX_TOKENS=1\n")
        ace_env.setenv("ACE_MAX_TOKENS", "900")
        assert LLMConfig.from_env(env_file=str(env_file)).max_tokens == 900

    def test_bad_number_names_the_variable(self, ace_env, tmp_path):
        ace_env.setenv("ACE_LLM_BACKEND", "dummy")
        ace_env.setenv("ACE_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="ACE_TIMEOUT"):
            LLMConfig.from_env(env_file=str(tmp_path / "missing.env"))


@pytest.mark.unit
class TestAdaptationConfig:
    def test_defaults(self):
        config = AdaptationConfig()
        assert config.max_retries == 3
        assert config.max_refinement_rounds == 1
        assert config.reflection_window == 3
        assert config.epochs == 1
        assert config.checkpoint_dir is None

    @pytest.mark.parametrize(
        "field,value",
        [
            ("max_retries", 0),
            ("max_refinement_rounds", 0),
            ("reflection_window", -1),
            ("epochs", 0),
            ("checkpoint_interval", 0),
        ],
    )
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValueError, match=field):
            AdaptationConfig(**{field: value})

    def test_from_env(self, ace_env, tmp_path):
        ace_env.setenv("ACE_MAX_RETRIES", "5")
        ace_env.setenv("ACE_REFINEMENT_ROUNDS", "2")
        ace_env.setenv("ACE_REFLECTION_WINDOW", "0")
        ace_env.setenv("ACE_CHECKPOINT_DIR", str(tmp_path))
        config = AdaptationConfig.from_env(env_file=str(tmp_path / "missing.env"))
        assert config.max_retries == 5
        assert config.max_refinement_rounds == 2
        assert config.reflection_window == 0
        assert config.checkpoint_dir == str(tmp_path)
