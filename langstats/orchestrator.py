"""Coordinates revision resolution, cache lookup, aggregation and write-back."""

from __future__ import annotations

from typing import Optional

from .aggregator import IncrementalAggregator
from .classifier import Classifier
from .config import DEFAULT_CACHE_FILENAME
from .git.repository import GitRepository
from .logging import get_logger
from .models import FrozenRecord, LanguageStats, LiveRecord
from .stores import StatsCache, format_version
from .stores.stats_cache import RawRecord


class Orchestrator:
    """Runs the incremental statistics pipeline for one repository."""

    def __init__(
        self,
        repository: GitRepository,
        classifier: Classifier,
        cache: StatsCache | None = None,
        aggregator: IncrementalAggregator | None = None,
        *,
        cache_filename: str = DEFAULT_CACHE_FILENAME,
    ) -> None:
        self.repository = repository
        self.classifier = classifier
        self.cache = cache or StatsCache(
            repository.git_dir / cache_filename,
            format_version(classifier.version()),
        )
        self.aggregator = aggregator or IncrementalAggregator(repository, classifier)
        self.logger = get_logger("orchestrator")

    def run(self, revision: Optional[str] = None, *, force: bool = False) -> LanguageStats:
        """Return statistics at ``revision`` (HEAD when omitted), reusing the cache when possible."""
        record = None if force else self.cache.read()
        if isinstance(record, FrozenRecord):
            self.logger.info("Cache is frozen; reporting stored statistics")
            return record.stats

        target = self.repository.resolve(revision) if revision else self.repository.resolve_head()

        if isinstance(record, LiveRecord):
            if record.revision == target:
                self.logger.info("Cache is current at %s", target)
                return record.stats
            self.logger.info("Updating cached statistics %s -> %s", record.revision, target)
            stats = self.aggregator.compute(target, seed=record)
        else:
            reason = "forced" if force else "no usable cache"
            self.logger.info("Scanning %s (%s)", target, reason)
            stats = self.aggregator.compute(target)

        self.cache.write(LiveRecord(revision=target, stats=stats))
        return stats

    def dump_raw_cache(self) -> Optional[RawRecord]:
        """Return the decoded cache record as stored, or ``None`` when there is none."""
        return self.cache.read_raw()

    def clear_cache(self) -> None:
        self.cache.delete()
        self.logger.info("Removed cache %s", self.cache.path)

    def freeze(self) -> None:
        """Pin the cache to empty statistics until it is cleared."""
        self.cache.write(FrozenRecord(stats=LanguageStats()))
        self.logger.info("Froze cache %s", self.cache.path)


__all__ = ["Orchestrator"]
