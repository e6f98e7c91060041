class QRBatchError(Exception):
    """Base class for recoverable, user-facing failures."""


class SourceDecodeError(QRBatchError):
    """The adapter could not interpret the uploaded bytes."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Could not read {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class NothingToExportError(QRBatchError):
    """An export was requested but there are no tokens to render."""


class IngestionSuperseded(QRBatchError):
    """A newer upload replaced this one before it finished; its result was discarded."""

    def __init__(self, filename: str):
        super().__init__(f"Processing of {filename} was superseded by a newer upload")
        self.filename = filename
