"""
Receipts API router for parsing OCR transcripts.
"""

from fastapi import APIRouter, HTTPException
from datetime import datetime, timezone
import logging
import time

from bookkee.config import settings
from bookkee.models.receipt import ParseRequest, ParseResponse
from bookkee.services.parser import extract

router = APIRouter(prefix="/receipts", tags=["receipts"])
logger = logging.getLogger(__name__)


@router.post("/parse", response_model=ParseResponse)
def parse_receipt(request: ParseRequest):
    """
    Parse the transcript returned by the text-detection service.

    This endpoint:
    1. Rejects transcripts above MAX_TEXT_LENGTH
    2. Runs date, amount and notes extraction
    3. Returns the fields alongside the raw text

    Args:
        request: Body with the OCR transcript

    Returns:
        Parsed fields, the raw text and a timestamp
    """
    text_length = len(request.text)
    if text_length > settings.MAX_TEXT_LENGTH:
        raise HTTPException(
            status_code=413,
            detail={
                "error": f"Text too large: {text_length} characters. Maximum: {settings.MAX_TEXT_LENGTH}",
                "code": "TEXT_TOO_LARGE",
            }
        )

    started = time.perf_counter()
    result = extract(request.text)
    elapsed_ms = (time.perf_counter() - started) * 1000

    logger.info("Receipt text parsed", extra={
        "text_length": text_length,
        "date": result.date,
        "amount": result.amount,
        "has_notes": result.notes is not None,
        "elapsed_ms": round(elapsed_ms, 2),
    })

    return ParseResponse(
        success=True,
        date=result.date,
        amount=result.amount,
        notes=result.notes,
        rawText=request.text,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
