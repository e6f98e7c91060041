from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from qrbatch.models.common import ExtractionMode

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="QRB_", env_file=".env", extra="ignore")

    storage_dir: str = Field(default="qrbatch_state", description="Directory holding one JSON file per state key")
    extraction_mode: ExtractionMode = Field(default=ExtractionMode.numeric, description="numeric | line")

    ocr_lang: str = Field(default="eng", description="Tesseract language pack")
    ocr_psm: int = Field(default=6, ge=0, le=13, description="Tesseract page segmentation mode")
    ocr_preprocess: bool = Field(default=True, description="Grayscale + Otsu threshold before OCR")

    qr_box_size: int = Field(default=10, ge=1, description="Pixels per QR module")
    qr_border: int = Field(default=4, ge=0, description="Quiet zone in modules")
    archive_name_max_len: int = Field(default=50, ge=1, description="Max chars of token text in image filenames")

    log_level: str = Field(default="INFO")

settings = Settings()
