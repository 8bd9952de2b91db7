"""Shared fixtures for the ace_playbook test suite."""

from __future__ import annotations

import pytest

from ace_playbook import Playbook, Sample, SimpleEnvironment


@pytest.fixture
def playbook() -> Playbook:
    return Playbook()


@pytest.fixture
def seeded_playbook() -> Playbook:
    """Two sections, three bullets, deterministic IDs."""
    pb = Playbook()
    pb.add_bullet("math", "Check units before answering", bullet_id="math-00001")
    pb.add_bullet("math", "Prefer exact fractions", bullet_id="math-00002")
    pb.add_bullet("style", "Answer with a single word", bullet_id="style-00001")
    return pb


@pytest.fixture
def environment() -> SimpleEnvironment:
    return SimpleEnvironment()


@pytest.fixture
def sample() -> Sample:
    return Sample(question="What is the answer?", ground_truth="42")
