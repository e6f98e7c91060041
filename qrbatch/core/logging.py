import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

_configured = False

def setup_logging(level: str | int | None = None) -> None:
    """
    Configure the root logger once with a console handler.
    Later calls only adjust the level.
    """
    global _configured
    if level is None:
        from qrbatch.core.config import settings
        level = settings.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # uvicorn access lines are noisy next to ours
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
