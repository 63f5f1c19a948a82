"""
Pydantic models for receipt extraction.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ExtractionResult(BaseModel):
    """Structured fields extracted from one receipt transcript."""
    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}$')  # YYYY-MM-DD, always set
    amount: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    class Config:
        frozen = True


class ParseRequest(BaseModel):
    """Request body for parsing an OCR transcript."""
    text: str = ""


class ParseResponse(BaseModel):
    """Model for parse API responses."""
    success: bool = True
    date: str
    amount: Optional[int] = None
    notes: Optional[str] = None
    rawText: str = ""
    timestamp: str  # ISO 8601
