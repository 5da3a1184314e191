"""Incremental language statistics for git repositories."""

__version__ = "0.1.0"

from .aggregator import IncrementalAggregator  # noqa: E402
from .classifier import Classifier, DefaultClassifier  # noqa: E402
from .models import FileEntry, FrozenRecord, LanguageStats, LiveRecord  # noqa: E402
from .orchestrator import Orchestrator  # noqa: E402

__all__ = [
    "Classifier",
    "DefaultClassifier",
    "FileEntry",
    "FrozenRecord",
    "IncrementalAggregator",
    "LanguageStats",
    "LiveRecord",
    "Orchestrator",
    "__version__",
]
