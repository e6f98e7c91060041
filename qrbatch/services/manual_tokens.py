from __future__ import annotations
import logging
from typing import Callable, Iterable, List, Optional

from qrbatch.models.common import AddResult, ExtractionMode
from qrbatch.services.token_extractor import is_valid_token

logger = logging.getLogger(__name__)


class ManualTokenManager:
    """
    Tokens typed in by hand, kept apart from file-derived ones.
    Ordered, no duplicates; on_change fires after every mutation.
    """

    def __init__(
        self,
        mode: ExtractionMode,
        tokens: Optional[Iterable[str]] = None,
        on_change: Optional[Callable[[List[str]], None]] = None,
    ):
        self.mode = ExtractionMode(mode)
        self.on_change = on_change
        self._tokens: List[str] = []
        for t in tokens or []:
            if isinstance(t, str) and t and t not in self._tokens:
                self._tokens.append(t)

    @property
    def tokens(self) -> List[str]:
        return list(self._tokens)

    def __contains__(self, token: str) -> bool:
        return token in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def add(self, token: str) -> AddResult:
        value = (token or "").strip()
        if not is_valid_token(value, self.mode):
            logger.info("Rejected manual token %r (%s mode)", token, self.mode.value)
            return AddResult.invalid
        if value in self._tokens:
            return AddResult.duplicate

        self._tokens.append(value)
        self._changed()
        return AddResult.success

    def remove(self, token: str) -> None:
        if token not in self._tokens:
            return
        self._tokens.remove(token)
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.tokens)
