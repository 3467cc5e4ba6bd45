"""JSON file persistence for the notification snapshot and response cache.

Writes are whole-file overwrites without locking or atomic rename, so an
interrupted write can leave a corrupt file behind. Loading therefore never
raises on bad content: a missing or unparseable file yields the default
empty value.
"""

import json
import logging
from pathlib import Path
from typing import Any

from hubox.config.settings import Settings, get_settings
from hubox.inbox.schemas import Snapshot
from hubox.storage.cache import ResponseCache

logger = logging.getLogger(__name__)

_LOAD_ERRORS = (OSError, ValueError, KeyError, TypeError, AttributeError)


class FileStore:
    """
    Loads and saves the Snapshot and ResponseCache under a data directory.

    Usage:
        store = FileStore()
        snapshot = store.load_snapshot()
        store.save_snapshot(snapshot)
    """

    def __init__(
        self,
        snapshot_path: Path | None = None,
        cache_path: Path | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._snapshot_path = Path(snapshot_path or settings.snapshot_path)
        self._cache_path = Path(cache_path or settings.cache_path)

    @property
    def snapshot_path(self) -> Path:
        return self._snapshot_path

    @property
    def cache_path(self) -> Path:
        return self._cache_path

    def load_snapshot(self, default_max_active: int | None = None) -> Snapshot:
        """Load the snapshot, falling back to an empty one on absence or corruption."""
        data = self._read_json(self._snapshot_path)
        if data is not None:
            try:
                return Snapshot.from_dict(data)
            except _LOAD_ERRORS as e:
                logger.warning("Discarding malformed snapshot %s: %s", self._snapshot_path, e)

        snapshot = Snapshot()
        if default_max_active is not None:
            snapshot.max_active = default_max_active
        return snapshot

    def save_snapshot(self, snapshot: Snapshot) -> None:
        self._write_json(self._snapshot_path, snapshot.to_dict())

    def load_cache(self) -> ResponseCache:
        """Load the response cache, falling back to an empty one on absence or corruption."""
        data = self._read_json(self._cache_path)
        if data is not None:
            try:
                return ResponseCache.from_dict(data)
            except _LOAD_ERRORS as e:
                logger.warning("Discarding malformed response cache %s: %s", self._cache_path, e)
        return ResponseCache()

    def save_cache(self, cache: ResponseCache) -> None:
        self._write_json(self._cache_path, cache.to_dict())

    def _read_json(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except _LOAD_ERRORS as e:
            logger.warning("Failed to read %s, using defaults: %s", path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Unexpected top-level JSON in %s, using defaults", path)
            return None
        return data

    def _write_json(self, path: Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug("Wrote %s", path)
