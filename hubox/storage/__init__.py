"""Storage layer: snapshot/cache files and keychain credentials."""

from hubox.storage.cache import CACHE_TTL_MS, CacheEntry, ResponseCache
from hubox.storage.credentials import CredentialStore
from hubox.storage.file_store import FileStore

__all__ = ["CACHE_TTL_MS", "CacheEntry", "CredentialStore", "FileStore", "ResponseCache"]
