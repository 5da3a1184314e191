from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from tests._fixtures.fakes import CountingClassifier, FakeRepository
from tests._fixtures.git_repo import GitRepoBuilder


@pytest.fixture
def fake_repo(tmp_path: Path) -> FakeRepository:
    """Provide an in-memory revision store whose git dir lives under tmp_path."""
    return FakeRepository(tmp_path / "repo.git")


@pytest.fixture
def classifier() -> CountingClassifier:
    return CountingClassifier()


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepoBuilder:
    """Provide a real git repository; skipped when git is not installed."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return GitRepoBuilder(tmp_path)
