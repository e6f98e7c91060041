from __future__ import annotations
from pydantic import BaseModel, Field, computed_field
from typing import List, Optional
from datetime import datetime, timezone
from qrbatch.models.common import AddResult, ExtractionMode

DISPLAY_NAME_LEN = 25

class UploadedFile(BaseModel):
    name: str = Field(..., examples=["invoice_march.png"])
    tokens: List[str] = Field(default_factory=list, description="Deduplicated tokens in display order")
    insertion_order: int = Field(..., ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def summary(self, index: int) -> "FileSummary":
        return FileSummary(index=index, name=self.name, insertion_order=self.insertion_order, token_count=len(self.tokens))

class FileSummary(BaseModel):
    index: int
    name: str
    insertion_order: int
    token_count: int

    @computed_field
    @property
    def display_name(self) -> str:
        if len(self.name) > DISPLAY_NAME_LEN:
            return self.name[:DISPLAY_NAME_LEN] + "..."
        return self.name

class IngestResponse(BaseModel):
    file: FileSummary
    tokens: List[str]
    message: str

class WorkspaceState(BaseModel):
    mode: ExtractionMode
    files: List[FileSummary]
    manual_tokens: List[str]
    active_index: Optional[int] = None
    active_tokens: List[str] = Field(default_factory=list, description="Tokens of the selected file, in display order")
    loading: bool = False

class ManualTokenRequest(BaseModel):
    token: str = Field(..., examples=["4780001234567"])

class ManualTokenResponse(BaseModel):
    result: AddResult
    tokens: List[str]
    message: str

class ExtractRequest(BaseModel):
    text: str
    mode: Optional[ExtractionMode] = None

class ExtractResponse(BaseModel):
    mode: ExtractionMode
    tokens: List[str]
