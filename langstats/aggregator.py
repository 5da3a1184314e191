"""Builds language statistics from a full tree walk or a prior snapshot plus a diff."""

from __future__ import annotations

from typing import Optional

from .classifier import Classifier
from .git.repository import REGULAR_FILE_MODES, GitRepository
from .logging import get_logger
from .models import ChangeKind, ContentAccessor, LanguageStats, LiveRecord


class IncrementalAggregator:
    """Computes per-file language assignments for a revision."""

    def __init__(self, repository: GitRepository, classifier: Classifier) -> None:
        self.repository = repository
        self.classifier = classifier
        self.logger = get_logger("aggregator")

    def compute(self, revision: str, seed: Optional[LiveRecord] = None) -> LanguageStats:
        """Return statistics at ``revision``.

        With a ``seed`` only the paths that differ between the seed revision and
        ``revision`` are classified; every other path keeps its seed entry. The
        seed itself is left untouched.
        """
        if seed is None:
            return self._full_scan(revision)
        if seed.revision == revision:
            return seed.stats.copy()
        if not self.repository.has_revision(seed.revision):
            self.logger.info(
                "Cached revision %s is no longer available; rescanning %s",
                seed.revision,
                revision,
            )
            return self._full_scan(revision)
        return self._apply_diff(seed, revision)

    def _full_scan(self, revision: str) -> LanguageStats:
        stats = LanguageStats()
        entries = self.repository.list_files(revision)
        self.logger.debug("Full scan of %s: %d files", revision, len(entries))
        for entry in entries:
            language = self.classifier.classify(entry.path, self._content(entry.blob))
            if language is not None:
                stats.set(entry.path, language, entry.size)
        return stats

    def _apply_diff(self, seed: LiveRecord, revision: str) -> LanguageStats:
        stats = seed.stats.copy()
        changes = self.repository.diff_trees(seed.revision, revision)
        self.logger.debug(
            "Incremental update %s..%s: %d changed paths", seed.revision, revision, len(changes)
        )
        for change in changes:
            # Drop the old contribution first; re-adding replaces it when still countable.
            stats.discard(change.path)
            if change.kind is ChangeKind.REMOVED:
                continue
            if change.blob is None or change.mode not in REGULAR_FILE_MODES:
                continue
            language = self.classifier.classify(change.path, self._content(change.blob))
            if language is not None:
                stats.set(change.path, language, self.repository.blob_size(change.blob))
        return stats

    def _content(self, blob: str) -> ContentAccessor:
        cached: list[bytes] = []

        def read() -> bytes:
            if not cached:
                cached.append(self.repository.read_blob(blob))
            return cached[0]

        return read


__all__ = ["IncrementalAggregator"]
