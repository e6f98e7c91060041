from __future__ import annotations
import asyncio
import logging
from typing import Optional

from qrbatch.core.config import Settings, settings as default_settings
from qrbatch.core.errors import IngestionSuperseded
from qrbatch.models.common import ExtractionMode
from qrbatch.models.tokens import UploadedFile
from qrbatch.services import source_adapter
from qrbatch.services.token_extractor import extract
from qrbatch.services.workspace import TokenWorkspace

logger = logging.getLogger(__name__)


class IngestionCoordinator:
    """
    One file in flight at a time, cancel-and-replace:
    - a new upload cancels whatever is still being read
    - the superseded caller gets IngestionSuperseded, its text is dropped
    - only the newest upload is ever committed to the workspace

    The adapter runs in a worker thread. A thread can't be interrupted, so a
    cancelled OCR call finishes in the background and its result is ignored.
    """

    def __init__(self, workspace: TokenWorkspace, cfg: Settings | None = None):
        self.workspace = workspace
        self.cfg = cfg or default_settings
        self._inflight: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def ingest(self, filename: str, data: bytes, mode: ExtractionMode | None = None) -> UploadedFile:
        mode = ExtractionMode(mode or self.workspace.mode)

        self._generation += 1
        generation = self._generation

        previous = self._inflight
        if previous is not None and not previous.done():
            logger.info("New upload %r supersedes the one in flight", filename)
            previous.cancel()

        task = asyncio.create_task(
            asyncio.to_thread(source_adapter.to_text, filename, data, self.cfg)
        )
        self._inflight = task
        try:
            text = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                raise IngestionSuperseded(filename) from None
            raise
        finally:
            if self._inflight is task:
                self._inflight = None

        # a newer upload may have started while this one was finishing
        if generation != self._generation:
            raise IngestionSuperseded(filename)

        tokens = extract(text, mode)
        uploaded = self.workspace.add_file(filename, tokens)
        logger.info("Ingested %r: %d tokens (%s mode)", filename, len(tokens), mode.value)
        return uploaded
