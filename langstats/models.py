"""Core data models shared across langstats components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Union

FROZEN_REVISION = "0" * 40

ContentAccessor = Callable[[], bytes]


class ChangeKind(str, Enum):
    """Kind of path change between two trees."""

    ADDED = "A"
    REMOVED = "D"
    MODIFIED = "M"


@dataclass(frozen=True)
class FileEntry:
    """Language assignment and byte size for a single tracked file."""

    language: str
    size: int


@dataclass
class LanguageStats:
    """Per-file language assignments for one repository snapshot.

    The aggregate and breakdown views are both derived from ``files`` so they
    can never disagree.
    """

    files: Dict[str, FileEntry] = field(default_factory=dict)

    def copy(self) -> "LanguageStats":
        return LanguageStats(files=dict(self.files))

    def set(self, path: str, language: str, size: int) -> None:
        self.files[path] = FileEntry(language=language, size=size)

    def discard(self, path: str) -> None:
        self.files.pop(path, None)

    def languages(self) -> Dict[str, int]:
        """Return language -> total bytes, largest first."""
        totals: Dict[str, int] = {}
        for entry in self.files.values():
            totals[entry.language] = totals.get(entry.language, 0) + entry.size
        ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
        return dict(ordered)

    def breakdown(self) -> Dict[str, str]:
        """Return path -> language, ordered by path."""
        return {path: self.files[path].language for path in sorted(self.files)}

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class TreeEntry:
    """A blob listed in a revision's tree."""

    path: str
    blob: str
    size: int
    mode: str = "100644"


@dataclass(frozen=True)
class TreeChange:
    """A path that differs between two trees.

    ``blob`` and ``mode`` describe the new side and are ``None`` for removals.
    """

    path: str
    kind: ChangeKind
    blob: Optional[str] = None
    mode: Optional[str] = None


@dataclass(frozen=True)
class LiveRecord:
    """Cached statistics computed at a concrete revision."""

    revision: str
    stats: LanguageStats


@dataclass(frozen=True)
class FrozenRecord:
    """Cached statistics that are reported as-is until the cache is cleared."""

    stats: LanguageStats


CacheRecord = Union[LiveRecord, FrozenRecord]
