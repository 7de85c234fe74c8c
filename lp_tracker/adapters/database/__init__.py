"""Database adapter for tracked players."""

from .manager import DatabaseManager, DuplicatePlayerError
from .models import Base, TrackedPlayer

__all__ = ["DatabaseManager", "DuplicatePlayerError", "Base", "TrackedPlayer"]
