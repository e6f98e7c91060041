from __future__ import annotations
import re
from typing import List

from qrbatch.models.common import ExtractionMode

# ASCII digits only; \d would also match other Unicode decimal digits
NUMBER_RE = re.compile(r"\b[0-9]{3,}\b")
MIN_NUMBER_LEN = 3


def _numeric_key(token: str):
    # compare by value without int(): huge runs exceed the int conversion limit
    digits = token.lstrip("0")
    return len(digits), digits, token


def extract_numbers(text: str) -> List[str]:
    found = NUMBER_RE.findall(text or "")
    return sorted(set(found), key=_numeric_key)


def extract_lines(text: str) -> List[str]:
    seen = set()
    out = []
    for raw in (text or "").splitlines():
        line = raw.strip()
        if not line or line in seen:
            continue
        seen.add(line)
        out.append(line)
    return out


def extract(raw_text: str, mode: ExtractionMode | str = ExtractionMode.numeric) -> List[str]:
    """
    Pull candidate tokens out of raw text.

    numeric: every standalone run of 3+ digits, unique by exact string,
             ascending by integer value ("0007" before "007" on ties).
    line:    every non-empty stripped line, unique, first-seen order.
    """
    mode = ExtractionMode(mode)
    if mode == ExtractionMode.line:
        return extract_lines(raw_text)
    return extract_numbers(raw_text)


def is_valid_token(token: str, mode: ExtractionMode | str) -> bool:
    """Validate an already-stripped manual token for the given mode."""
    if not token:
        return False
    if ExtractionMode(mode) == ExtractionMode.numeric:
        return token.isascii() and token.isdigit()
    return True


def tokens_as_text(tokens: List[str]) -> str:
    return "\n".join(tokens)
