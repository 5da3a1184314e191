"""Persistence backends for langstats."""

from .stats_cache import SCHEMA_VERSION, StatsCache, format_version

__all__ = ["SCHEMA_VERSION", "StatsCache", "format_version"]
