"""
Local Store
Persistent string key-value store backing demo mode.

Mirrors browser localStorage: every value is a string (the JSON-serialized
array of one entity), the whole store lives in a single JSON file. Writes go
through a temp file and os.replace so a crash never leaves a torn file.

Lifecycle is explicit:

    store = LocalStore.open(config.DEMO_STORE_PATH)
    store.set_item('demo_organizations', '[...]')   # flushed immediately
    store.close()
"""

import json
import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

logger = logging.getLogger(__name__)


class LocalStore:
    """String key-value store persisted to one JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None, autoflush: bool = True):
        """
        Args:
            path: File to persist to. None keeps the store in memory only.
            autoflush: Write the file after every set/remove.
        """
        self.path = Path(path) if path else None
        self.autoflush = autoflush
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def open(cls, path: Optional[Union[str, Path]] = None, autoflush: bool = True) -> 'LocalStore':
        """Create a store and load whatever is already on disk."""
        store = cls(path, autoflush=autoflush)
        store.load()
        return store

    def load(self):
        if self.path is None or not self.path.exists():
            return
        content = self.path.read_text(encoding='utf-8').strip()
        if not content:
            return
        try:
            items = json.loads(content)
        except json.JSONDecodeError as e:
            # Keep the broken file for inspection, start empty
            backup = self.path.with_name(f"{self.path.name}.backup.{datetime.now().strftime('%Y%m%d_%H%M%S')}")
            os.replace(self.path, backup)
            logger.warning(f"Corrupted store {self.path} ({e}); moved to {backup}")
            return
        if not isinstance(items, dict):
            raise ValueError(f"Store file {self.path} must hold a JSON object")
        self._items = {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in items.items()}
        logger.debug(f"Loaded store {self.path}: {len(self._items)} keys")

    # ------------------------------------------------------------------
    # localStorage-style API
    # ------------------------------------------------------------------

    def get_item(self, key: str) -> Optional[str]:
        self._check_open()
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._check_open()
        if not isinstance(value, str):
            raise TypeError("LocalStore values must be strings")
        with self._lock:
            self._items[key] = value
        if self.autoflush:
            self.flush()

    def remove_item(self, key: str):
        self._check_open()
        with self._lock:
            self._items.pop(key, None)
        if self.autoflush:
            self.flush()

    def clear(self):
        self._check_open()
        with self._lock:
            self._items.clear()
        if self.autoflush:
            self.flush()

    def keys(self) -> Iterator[str]:
        return iter(list(self._items))

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def flush(self):
        """Persist the whole store atomically. No-op for in-memory stores."""
        if self.path is None:
            return
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_name(self.path.name + '.tmp')
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(self._items, f, ensure_ascii=False, indent=2)
                os.replace(temp_path, self.path)
            except OSError:
                if temp_path.exists():
                    temp_path.unlink()
                raise

    def close(self):
        if self._closed:
            return
        self.flush()
        self._closed = True

    def _check_open(self):
        if self._closed:
            raise RuntimeError("LocalStore is closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
