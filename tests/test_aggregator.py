"""Tests for langstats.aggregator."""

from __future__ import annotations

from langstats.aggregator import IncrementalAggregator
from langstats.models import LanguageStats, LiveRecord

from tests._fixtures.fakes import CountingClassifier, FakeRepository


def _full(repo: FakeRepository, revision: str) -> LanguageStats:
    return IncrementalAggregator(repo, CountingClassifier()).compute(revision)


def test_full_scan_counts_classifiable_files(fake_repo: FakeRepository, classifier: CountingClassifier) -> None:
    revision = fake_repo.commit({"a.py": "x" * 50, "b.go": "y" * 30, "README": "plain text"})

    stats = IncrementalAggregator(fake_repo, classifier).compute(revision)

    assert stats.languages() == {"Python": 50, "Go": 30}
    assert stats.breakdown() == {"a.py": "Python", "b.go": "Go"}
    assert "README" not in stats.files
    assert sorted(classifier.calls) == ["README", "a.py", "b.go"]


def test_content_is_read_only_when_classifier_asks(fake_repo: FakeRepository, classifier: CountingClassifier) -> None:
    revision = fake_repo.commit({"a.py": "x" * 10, "tool": "#!/usr/bin/env python\nprint()\n"})

    stats = IncrementalAggregator(fake_repo, classifier).compute(revision)

    assert stats.breakdown() == {"a.py": "Python", "tool": "Python"}
    assert fake_repo.calls.count("read_blob") == 1


def test_incremental_add_classifies_only_new_file(fake_repo: FakeRepository, classifier: CountingClassifier) -> None:
    first = fake_repo.commit({"a.py": "x" * 50, "b.go": "y" * 30})
    seed = LiveRecord(revision=first, stats=_full(fake_repo, first))
    second = fake_repo.commit({"c.rb": "z" * 20})
    fake_repo.calls.clear()

    stats = IncrementalAggregator(fake_repo, classifier).compute(second, seed=seed)

    assert stats.languages() == {"Python": 50, "Go": 30, "Ruby": 20}
    assert classifier.calls == ["c.rb"]
    assert "list_files" not in fake_repo.calls


def test_incremental_remove_and_modify(fake_repo: FakeRepository, classifier: CountingClassifier) -> None:
    first = fake_repo.commit({"a.py": "x" * 50, "b.go": "y" * 30, "c.rb": "z" * 20})
    seed = LiveRecord(revision=first, stats=_full(fake_repo, first))
    second = fake_repo.commit({"a.py": "x" * 80}, remove=["b.go"])

    stats = IncrementalAggregator(fake_repo, classifier).compute(second, seed=seed)

    assert stats.languages() == {"Python": 80, "Ruby": 20}
    assert stats.breakdown() == {"a.py": "Python", "c.rb": "Ruby"}
    assert classifier.calls == ["a.py"]
    assert stats == _full(fake_repo, second)


def test_incremental_does_not_mutate_seed(fake_repo: FakeRepository, classifier: CountingClassifier) -> None:
    first = fake_repo.commit({"a.py": "x" * 50})
    seed_stats = _full(fake_repo, first)
    seed = LiveRecord(revision=first, stats=seed_stats)
    second = fake_repo.commit({"b.go": "y"}, remove=["a.py"])

    IncrementalAggregator(fake_repo, classifier).compute(second, seed=seed)

    assert seed_stats.breakdown() == {"a.py": "Python"}


def test_file_that_becomes_unclassifiable_is_dropped(fake_repo: FakeRepository, classifier: CountingClassifier) -> None:
    first = fake_repo.commit({"tool": "#!/usr/bin/env python\n", "a.py": "x"})
    seed = LiveRecord(revision=first, stats=_full(fake_repo, first))
    second = fake_repo.commit({"tool": "just some notes\n"})

    stats = IncrementalAggregator(fake_repo, classifier).compute(second, seed=seed)

    assert stats.breakdown() == {"a.py": "Python"}


def test_incremental_steps_match_full_scan(fake_repo: FakeRepository) -> None:
    steps = [
        ({"a.py": "1" * 10, "b.go": "2" * 20}, []),
        ({"c.rb": "3" * 30}, []),
        ({"a.py": "4" * 5, "d.js": "5" * 7}, ["b.go"]),
        ({"lib/e.py": "6" * 11}, ["c.rb"]),
        ({}, ["a.py", "d.js"]),
    ]
    aggregator = IncrementalAggregator(fake_repo, CountingClassifier())
    record = None
    for files, removed in steps:
        revision = fake_repo.commit(files, remove=removed)
        stats = aggregator.compute(revision, seed=record)
        assert stats == _full(fake_repo, revision)
        record = LiveRecord(revision=revision, stats=stats)


def test_unrelated_history_is_a_symmetric_diff(fake_repo: FakeRepository, classifier: CountingClassifier) -> None:
    root = fake_repo.commit({"shared.py": "s" * 4})
    branch_a = fake_repo.commit({"a.py": "a" * 10, "moved/x.go": "x" * 3}, parent=root)
    branch_b = fake_repo.commit({"b.rb": "b" * 6, "x.go": "x" * 3}, parent=root)
    seed = LiveRecord(revision=branch_a, stats=_full(fake_repo, branch_a))

    stats = IncrementalAggregator(fake_repo, classifier).compute(branch_b, seed=seed)

    assert stats == _full(fake_repo, branch_b)
    assert sorted(classifier.calls) == ["b.rb", "x.go"]


def test_missing_seed_revision_falls_back_to_full_scan(fake_repo: FakeRepository, classifier: CountingClassifier) -> None:
    first = fake_repo.commit({"a.py": "x" * 5})
    seed = LiveRecord(revision=first, stats=_full(fake_repo, first))
    second = fake_repo.commit({"b.go": "y" * 3})
    fake_repo.forget(first)

    stats = IncrementalAggregator(fake_repo, classifier).compute(second, seed=seed)

    assert stats.languages() == {"Python": 5, "Go": 3}
    assert sorted(classifier.calls) == ["a.py", "b.go"]
    assert "diff_trees" not in fake_repo.calls
