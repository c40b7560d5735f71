"""스토리지 모듈."""

from repo_scout.storage.base import CatalogStore
from repo_scout.storage.memory import InMemoryStorage
from repo_scout.storage.supabase import SupabaseStorage

__all__ = ["CatalogStore", "InMemoryStorage", "SupabaseStorage"]
