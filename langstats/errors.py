"""Exception types raised by langstats."""

from __future__ import annotations

from typing import Sequence


class LangStatsError(RuntimeError):
    """Base class for fatal langstats errors."""


class GitError(LangStatsError):
    """Raised when a git command fails."""

    def __init__(self, args: Sequence[str], stderr: str = "", returncode: int | None = None) -> None:
        self.command = list(args)
        self.stderr = stderr.strip()
        self.returncode = returncode
        message = f"git command failed: {' '.join(self.command)}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class CacheWriteError(LangStatsError):
    """Raised when the statistics cache cannot be written."""


class ConfigError(LangStatsError):
    """Raised when the configuration file cannot be parsed."""


__all__ = ["CacheWriteError", "ConfigError", "GitError", "LangStatsError"]
