"""Persistent, compressed cache of language statistics for one repository."""

from __future__ import annotations

import json
import os
import tempfile
import zlib
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..errors import CacheWriteError
from ..git.repository import is_revision_id
from ..logging import get_logger
from ..models import FROZEN_REVISION, CacheRecord, FileEntry, FrozenRecord, LanguageStats, LiveRecord

SCHEMA_VERSION = 1

RawRecord = Tuple[str, str, Dict[str, object]]

_logger = get_logger("cache")


def format_version(classifier_version: str) -> str:
    """Return the cache format version for a classifier version."""
    return f"{SCHEMA_VERSION}:{classifier_version}"


class StatsCache:
    """Stores a single ``(format_version, revision, files)`` record on disk.

    Records are JSON encoded and zlib compressed. Anything that cannot be
    decoded, or that was written under another format version, is reported as
    a miss rather than an error.
    """

    def __init__(self, path: Path, version: str) -> None:
        self.path = Path(path)
        self.version = version

    def read(self) -> Optional[CacheRecord]:
        raw = self.read_raw()
        if raw is None:
            return None
        version, revision, files = raw
        if version != self.version:
            _logger.debug("Ignoring cache written by format %s (expected %s)", version, self.version)
            return None
        stats = _decode_stats(files)
        if stats is None:
            _logger.debug("Ignoring cache with malformed file entries at %s", self.path)
            return None
        if revision == FROZEN_REVISION:
            return FrozenRecord(stats=stats)
        return LiveRecord(revision=revision, stats=stats)

    def read_raw(self) -> Optional[RawRecord]:
        """Return the decoded record without checking its format version."""
        try:
            compressed = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            _logger.debug("Unable to read cache %s: %s", self.path, exc)
            return None
        try:
            payload = json.loads(zlib.decompress(compressed).decode("utf-8"))
        except (zlib.error, UnicodeDecodeError, ValueError, RecursionError) as exc:
            _logger.debug("Unable to decode cache %s: %s", self.path, exc)
            return None
        if not isinstance(payload, list) or len(payload) != 3:
            return None
        version, revision, files = payload
        if not isinstance(version, str) or not isinstance(revision, str):
            return None
        if not is_revision_id(revision) or not isinstance(files, dict):
            return None
        return version, revision, files

    def write(self, record: CacheRecord) -> None:
        """Atomically replace the cache file with ``record``."""
        if isinstance(record, FrozenRecord):
            revision = FROZEN_REVISION
        else:
            revision = record.revision
        payload = [self.version, revision, _encode_stats(record.stats)]
        data = zlib.compress(
            json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8"),
            6,
        )

        tmp_path: Optional[str] = None
        published = False
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Same directory as the destination so the rename stays on one filesystem.
            tmp_fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(tmp_fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
            published = True
        except OSError as exc:
            raise CacheWriteError(f"Failed to write cache {self.path}: {exc}") from exc
        finally:
            if not published and tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    _logger.debug("Could not remove temporary cache file %s", tmp_path)
        _logger.debug("Wrote cache for %s (%d files) to %s", revision, len(record.stats), self.path)

    def delete(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise CacheWriteError(f"Failed to remove cache {self.path}: {exc}") from exc


def _encode_stats(stats: LanguageStats) -> Dict[str, List[object]]:
    return {path: [entry.language, entry.size] for path, entry in stats.files.items()}


def _decode_stats(files: Dict[str, object]) -> Optional[LanguageStats]:
    decoded: Dict[str, FileEntry] = {}
    for path, raw in files.items():
        if not isinstance(raw, list) or len(raw) != 2:
            return None
        language, size = raw
        if not isinstance(language, str) or not language:
            return None
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            return None
        decoded[path] = FileEntry(language=language, size=size)
    return LanguageStats(files=decoded)


__all__ = ["RawRecord", "SCHEMA_VERSION", "StatsCache", "format_version"]
