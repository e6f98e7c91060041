"""
Source adapters: turn an uploaded file of unknown type into plain text.

- image (.png .jpg .jpeg)       -> OCR via Tesseract
- spreadsheet (.xlsx .xls .csv) -> first sheet, cells flattened row-major
- anything else                 -> raw text

Classification is by filename suffix only, never by sniffing content.
"""
from __future__ import annotations
import csv
import io
import logging
import os
import sys
from typing import Iterable, List

import cv2
import numpy as np
import pandas as pd
import pytesseract

from qrbatch.core.config import Settings, settings as default_settings
from qrbatch.core.errors import SourceDecodeError
from qrbatch.models.common import SourceKind

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}
SPREADSHEET_EXTENSIONS = {".xlsx", ".xls", ".csv"}
TEXT_EXTENSIONS = {".txt"}
ACCEPTED_EXTENSIONS = sorted(IMAGE_EXTENSIONS | SPREADSHEET_EXTENSIONS | TEXT_EXTENSIONS)

# a single spreadsheet cell may hold a whole document
CSV_FIELD_LIMIT = min(sys.maxsize, 2**31 - 1)

EXCEL_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}


def _suffix(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def classify(filename: str) -> SourceKind:
    ext = _suffix(filename)
    if ext in IMAGE_EXTENSIONS:
        return SourceKind.image
    if ext in SPREADSHEET_EXTENSIONS:
        return SourceKind.spreadsheet
    return SourceKind.text


def decode_text(data: bytes) -> str:
    # utf-8-sig drops a leading BOM; bad bytes become U+FFFD like a browser would
    return data.decode("utf-8-sig", errors="replace")


# ---------- Images ----------
def _ocr_config(cfg: Settings) -> str:
    # no whitelist: digits glued to letters (INV2024001) must stay glued
    return f"--psm {cfg.ocr_psm}"


def _preprocess(img_bgr: np.ndarray) -> np.ndarray:
    gray = cv2.cvtColor(img_bgr, cv2.COLOR_BGR2GRAY)
    _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    return binary


def image_to_text(filename: str, data: bytes, cfg: Settings) -> str:
    buf = np.frombuffer(data, dtype=np.uint8)
    img_bgr = cv2.imdecode(buf, cv2.IMREAD_COLOR) if buf.size else None
    if img_bgr is None:
        raise SourceDecodeError(filename, "not a readable image")

    img = _preprocess(img_bgr) if cfg.ocr_preprocess else cv2.cvtColor(img_bgr, cv2.COLOR_BGR2RGB)
    try:
        return pytesseract.image_to_string(img, lang=cfg.ocr_lang, config=_ocr_config(cfg))
    except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as ex:
        raise SourceDecodeError(filename, f"OCR failed ({ex})") from ex


# ---------- Spreadsheets ----------
def cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _join_cells(cells: Iterable) -> str:
    return "\n".join(t for t in (cell_text(c) for c in cells) if t)


def csv_to_text(filename: str, data: bytes) -> str:
    if csv.field_size_limit() < CSV_FIELD_LIMIT:
        csv.field_size_limit(CSV_FIELD_LIMIT)
    try:
        rows = list(csv.reader(io.StringIO(decode_text(data))))
    except csv.Error as ex:
        raise SourceDecodeError(filename, f"bad CSV ({ex})") from ex
    return _join_cells(c for row in rows for c in row)


def workbook_to_text(filename: str, data: bytes) -> str:
    engine = EXCEL_ENGINES[_suffix(filename)]
    try:
        df = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, engine=engine)
    except Exception as ex:
        raise SourceDecodeError(filename, f"unreadable workbook ({ex})") from ex
    cells: List = [None if pd.isna(v) else v for v in df.to_numpy().ravel()]
    return _join_cells(cells)


def spreadsheet_to_text(filename: str, data: bytes) -> str:
    if _suffix(filename) == ".csv":
        return csv_to_text(filename, data)
    return workbook_to_text(filename, data)


# ---------- Entry point ----------
def to_text(
    filename: str,
    data: bytes,
    cfg: Settings | None = None,
) -> str:
    """Dispatch on suffix. Raises SourceDecodeError when the bytes can't be interpreted."""
    cfg = cfg or default_settings
    kind = classify(filename)
    logger.debug("Reading %s as %s (%d bytes)", filename, kind.value, len(data))

    if kind == SourceKind.image:
        return image_to_text(filename, data, cfg)
    if kind == SourceKind.spreadsheet:
        return spreadsheet_to_text(filename, data)
    return decode_text(data)
