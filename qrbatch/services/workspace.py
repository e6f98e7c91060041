from __future__ import annotations
import logging
from typing import List, Optional

from pydantic import ValidationError

from qrbatch.models.common import ExtractionMode
from qrbatch.models.tokens import UploadedFile, WorkspaceState
from qrbatch.services.manual_tokens import ManualTokenManager
from qrbatch.services.storage import (
    ACTIVE_INDEX_KEY,
    FILES_KEY,
    MANUAL_TOKENS_KEY,
    JsonStateStore,
)

logger = logging.getLogger(__name__)


class TokenWorkspace:
    """
    Application state, owned by whoever builds the app:
    - processed files with their tokens
    - manually entered tokens
    - which file is currently selected

    Every mutation is written through to the store; construction rehydrates from it.
    """

    def __init__(self, store: JsonStateStore, mode: ExtractionMode = ExtractionMode.numeric):
        self.store = store
        self.mode = ExtractionMode(mode)
        self.files: List[UploadedFile] = []
        self.active_index: Optional[int] = None
        self._next_order = 0
        self._load()

    # ---------- Rehydration ----------
    def _load(self) -> None:
        raw_files = self.store.get(FILES_KEY, [])
        if not isinstance(raw_files, list):
            logger.warning("Stored file list is not a list; starting empty")
            raw_files = []
        for item in raw_files:
            try:
                self.files.append(UploadedFile.model_validate(item))
            except ValidationError as ex:
                logger.warning("Skipping malformed stored file record: %s", ex.errors()[:1])
        if self.files:
            self._next_order = max(f.insertion_order for f in self.files) + 1

        raw_manual = self.store.get(MANUAL_TOKENS_KEY, [])
        if not isinstance(raw_manual, list):
            raw_manual = []
        self.manual = ManualTokenManager(self.mode, tokens=raw_manual, on_change=self._save_manual)

        idx = self.store.get(ACTIVE_INDEX_KEY, None)
        # bool is an int subclass; reject it explicitly
        if type(idx) is int and 0 <= idx < len(self.files):
            self.active_index = idx
        elif idx is not None:
            logger.warning("Dropping stale active index %r", idx)

        logger.info("Loaded %d files, %d manual tokens", len(self.files), len(self.manual))

    # ---------- Persistence ----------
    def _save_files(self) -> None:
        self.store.set(FILES_KEY, [f.model_dump(mode="json") for f in self.files])

    def _save_active(self) -> None:
        self.store.set(ACTIVE_INDEX_KEY, self.active_index)

    def _save_manual(self, tokens: List[str]) -> None:
        self.store.set(MANUAL_TOKENS_KEY, tokens)

    # ---------- Files ----------
    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.files):
            raise IndexError(f"file index {index} out of range")

    def get_file(self, index: int) -> UploadedFile:
        self._check_index(index)
        return self.files[index]

    @property
    def active_file(self) -> Optional[UploadedFile]:
        if self.active_index is None:
            return None
        return self.files[self.active_index]

    def add_file(self, name: str, tokens: List[str]) -> UploadedFile:
        uf = UploadedFile(name=name, tokens=list(dict.fromkeys(tokens)), insertion_order=self._next_order)
        self._next_order += 1
        self.files.append(uf)
        self.active_index = len(self.files) - 1
        self._save_files()
        self._save_active()
        return uf

    def remove_file(self, index: int) -> UploadedFile:
        self._check_index(index)
        removed = self.files.pop(index)
        if self.active_index is not None:
            if index == self.active_index:
                self.active_index = None
            elif index < self.active_index:
                # keep pointing at the same file
                self.active_index -= 1
        self._save_files()
        self._save_active()
        logger.info("Removed file %r", removed.name)
        return removed

    def select(self, index: Optional[int]) -> None:
        if index is not None:
            self._check_index(index)
        self.active_index = index
        self._save_active()

    def has_token(self, token: str) -> bool:
        if token in self.manual:
            return True
        return any(token in f.tokens for f in self.files)

    def snapshot(self, loading: bool = False) -> WorkspaceState:
        active = self.active_file
        return WorkspaceState(
            mode=self.mode,
            files=[f.summary(i) for i, f in enumerate(self.files)],
            manual_tokens=self.manual.tokens,
            active_index=self.active_index,
            active_tokens=active.tokens if active else [],
            loading=loading,
        )
