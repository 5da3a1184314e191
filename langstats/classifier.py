"""File classification used to assign languages to tracked blobs."""

from __future__ import annotations

import hashlib
import json
from abc import ABC, abstractmethod
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import Dict, Optional, Sequence

from . import __version__
from .config import LangStatsConfig
from .models import ContentAccessor

_LANGUAGE_BY_SUFFIX = {
    ".py": "Python",
    ".pyi": "Python",
    ".pyx": "Cython",
    ".js": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".jsx": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".hpp": "C++",
    ".cc": "C++",
    ".hh": "C++",
    ".cxx": "C++",
    ".swift": "Swift",
    ".m": "Objective-C",
    ".mm": "Objective-C++",
    ".scala": "Scala",
    ".r": "R",
    ".jl": "Julia",
    ".lua": "Lua",
    ".pl": "Perl",
    ".pm": "Perl",
    ".hs": "Haskell",
    ".ex": "Elixir",
    ".exs": "Elixir",
    ".erl": "Erlang",
    ".clj": "Clojure",
    ".dart": "Dart",
    ".sh": "Shell",
    ".bash": "Shell",
    ".zsh": "Shell",
    ".ps1": "PowerShell",
    ".bat": "Batchfile",
    ".cmd": "Batchfile",
    ".html": "HTML",
    ".htm": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
    ".vue": "Vue",
    ".sql": "SQL",
}

_LANGUAGE_BY_FILENAME = {
    "Makefile": "Makefile",
    "GNUmakefile": "Makefile",
    "Dockerfile": "Dockerfile",
    "CMakeLists.txt": "CMake",
    "Rakefile": "Ruby",
    "Gemfile": "Ruby",
    "Vagrantfile": "Ruby",
    "BUILD.bazel": "Starlark",
}

_LANGUAGE_BY_INTERPRETER = {
    "python": "Python",
    "ruby": "Ruby",
    "node": "JavaScript",
    "perl": "Perl",
    "sh": "Shell",
    "bash": "Shell",
    "zsh": "Shell",
    "php": "PHP",
    "lua": "Lua",
}

_VENDORED_PATTERNS: Sequence[str] = (
    "node_modules/",
    "vendor/",
    "vendors/",
    "third_party/",
    "third-party/",
    "bower_components/",
    "dist/",
    "**/*.min.js",
    "**/*.min.css",
)

_GENERATED_PATTERNS: Sequence[str] = (
    "**/*_pb2.py",
    "**/*_pb2_grpc.py",
    "**/*.pb.go",
    "**/*.designer.cs",
)

_DOCUMENTATION_PATTERNS: Sequence[str] = (
    "docs/",
    "doc/",
    "Documentation/",
    "examples/",
    "samples/",
)

_BINARY_SNIFF_BYTES = 8000


class Classifier(ABC):
    """Contract for assigning a language to a tracked file."""

    @abstractmethod
    def classify(self, path: str, content: ContentAccessor) -> Optional[str]:
        """Return the language for ``path`` or ``None`` when it must not be counted.

        ``content`` returns the blob bytes; implementations should only call it
        when the path alone is not conclusive.
        """

    @abstractmethod
    def version(self) -> str:
        """Return an identifier that changes whenever classification results may change."""


class DefaultClassifier(Classifier):
    """Suffix, filename and shebang based classifier with vendored-file detection."""

    def __init__(self, config: LangStatsConfig | None = None) -> None:
        if config is None:
            config = LangStatsConfig(root=Path("."))
        self._settings = config.fingerprint_fields()
        self._exclude = list(config.exclude_paths)
        self._vendored = list(_VENDORED_PATTERNS) + list(config.vendored)
        self._include_docs = config.include_documentation
        self._suffixes: Dict[str, str] = dict(_LANGUAGE_BY_SUFFIX)
        self._filenames: Dict[str, str] = dict(_LANGUAGE_BY_FILENAME)
        for key, language in config.languages.items():
            if key.startswith("."):
                self._suffixes[key.lower()] = language
            else:
                self._filenames[key] = language

    def classify(self, path: str, content: ContentAccessor) -> Optional[str]:
        if _matches_any(path, self._exclude):
            return None
        if _matches_any(path, self._vendored) or _matches_any(path, _GENERATED_PATTERNS):
            return None
        if not self._include_docs and _matches_any(path, _DOCUMENTATION_PATTERNS):
            return None

        name = PurePosixPath(path).name
        if name in self._filenames:
            return self._filenames[name]
        suffix = PurePosixPath(name).suffix.lower()
        if suffix:
            return self._suffixes.get(suffix)

        data = content()
        if _looks_binary(data):
            return None
        return _language_from_shebang(data)

    def version(self) -> str:
        digest = hashlib.sha256(
            json.dumps(self._settings, sort_keys=True).encode("utf-8")
        ).hexdigest()[:12]
        return f"default-{__version__}+{digest}"


def path_matches(path: str, pattern: str) -> bool:
    """Match a repository path against a directory prefix or glob pattern."""
    normalized = path.replace("\\", "/")
    if pattern.endswith("/**"):
        prefix = pattern[:-3]
        return normalized == prefix or normalized.startswith(f"{prefix}/")
    if pattern.endswith("/"):
        return normalized.startswith(pattern) or f"/{pattern}" in f"/{normalized}"
    if pattern.startswith("**/"):
        suffix = pattern[3:]
        return fnmatch(PurePosixPath(normalized).name, suffix) or fnmatch(normalized, pattern)
    if "/" in pattern or any(ch in pattern for ch in "*?["):
        return fnmatch(normalized, pattern)
    if normalized == pattern:
        return True
    return normalized.endswith(f"/{pattern}")


def _matches_any(path: str, patterns: Sequence[str]) -> bool:
    return any(path_matches(path, pattern) for pattern in patterns)


def _looks_binary(data: bytes) -> bool:
    return b"\0" in data[:_BINARY_SNIFF_BYTES]


def _language_from_shebang(data: bytes) -> Optional[str]:
    if not data.startswith(b"#!"):
        return None
    first_line = data.split(b"\n", 1)[0][2:].decode("utf-8", "replace").strip()
    parts = first_line.split()
    if not parts:
        return None
    interpreter = PurePosixPath(parts[0]).name
    if interpreter == "env":
        args = [part for part in parts[1:] if not part.startswith("-")]
        if not args:
            return None
        interpreter = args[0]
    interpreter = interpreter.rstrip("0123456789.") or interpreter
    return _LANGUAGE_BY_INTERPRETER.get(interpreter)


__all__ = ["Classifier", "DefaultClassifier", "path_matches"]
