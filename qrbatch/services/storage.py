from __future__ import annotations
import json
import logging
import os
import tempfile
from typing import Any
from qrbatch.core.config import settings

logger = logging.getLogger(__name__)

FILES_KEY = "files"
MANUAL_TOKENS_KEY = "manual_tokens"
ACTIVE_INDEX_KEY = "active_index"


class JsonStateStore:
    """
    Key-value persistence, one JSON file per key so a corrupt entry
    never takes the others down with it.
    Reads fall back to the default; writes are best-effort.
    """
    def __init__(self, root: str | None = None):
        self.root = root or settings.storage_dir

    def _path(self, key: str) -> str:
        return os.path.join(self.root, f"{key}.json")

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not os.path.exists(path):
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as ex:
            logger.warning("Ignoring unreadable state entry %r (%s)", key, ex)
            return default

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp = None
        try:
            os.makedirs(self.root, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.root)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, default=str)
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as ex:
            logger.error("Failed to persist state entry %r: %s", key, ex)
            if tmp and os.path.exists(tmp):
                os.remove(tmp)
