"""profile management for AWS role credentials."""
from .manager import ProfileManager
from .store import ProfileStore

__all__ = [
    "ProfileManager",
    "ProfileStore",
]
