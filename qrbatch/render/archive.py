from __future__ import annotations
import io
import re
import zipfile
from typing import Iterable, List

from qrbatch.core.errors import NothingToExportError
from qrbatch.render.qr_renderer import QRRenderer

IMAGE_PREFIX = "QR_"
ARCHIVE_SUFFIX = "_QR_Codes.zip"
DEFAULT_NAME_LEN = 50

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize(text: str, max_len: int = DEFAULT_NAME_LEN) -> str:
    base = _UNSAFE_RE.sub("_", text.strip())
    base = re.sub(r"_+", "_", base).strip("_")
    return base[:max_len] or "token"


def image_filename(token: str, max_len: int = DEFAULT_NAME_LEN) -> str:
    return f"{IMAGE_PREFIX}{sanitize(token, max_len)}.png"


def archive_filename(source_name: str) -> str:
    return f"{sanitize(source_name, 120)}{ARCHIVE_SUFFIX}"


def unique_names(tokens: Iterable[str], max_len: int = DEFAULT_NAME_LEN) -> List[str]:
    """Filenames for each token; later clashes get _2, _3, ... before the extension."""
    used = set()
    names = []
    for token in tokens:
        name = image_filename(token, max_len)
        stem = name[: -len(".png")]
        n = 1
        while name in used:
            n += 1
            name = f"{stem}_{n}.png"
        used.add(name)
        names.append(name)
    return names


def pack(tokens: List[str], renderer: QRRenderer, max_len: int = DEFAULT_NAME_LEN) -> bytes:
    """One deflated ZIP holding a PNG per token."""
    if not tokens:
        raise NothingToExportError("No QR codes to export")

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for token, name in zip(tokens, unique_names(tokens, max_len)):
            zf.writestr(name, renderer.render_png(token))
    return buf.getvalue()
