"""Git object database access."""

from .repository import GitRepository, is_revision_id

__all__ = ["GitRepository", "is_revision_id"]
