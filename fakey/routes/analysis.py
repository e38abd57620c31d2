"""
analysis.py — Forensic analysis endpoints.

Routes:
  POST /api/v1/analysis/media           — deepfake verdict for an image / video / audio file
  POST /api/v1/analysis/text            — AI-authorship detection or fact check
  POST /api/v1/analysis/reverse-search  — original-source lookup for an image
  POST /api/v1/analysis/transcribe      — WAV → transcript
  POST /api/v1/analysis/report          — plain-text case report for an AnalysisResult

HOW THE DATA FLOWS
──────────────────
1. The web client reads the upload with FileReader.readAsDataURL() and strips
   the "data:...;base64," prefix; the raw base64 arrives in the JSON body.
2. The request model rejects undecodable base64 with a 422.
3. The route decodes the bytes and hands them to forensics_service.
4. Gemini's JSON is normalized into a fully-populated response model; a
   garbled answer yields defaults, never a 500.

No authentication required.
"""

import base64
import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from fakey.ai.forensics import forensics_service, mime_from_filename
from fakey.core.rate_limit import limiter
from fakey.models.analysis import AnalysisResult
from fakey.models.requests import (
    MediaAnalysisRequest,
    ReportRequest,
    ReverseSearchRequest,
    TextAnalysisRequest,
    TranscriptionRequest,
    TranscriptionResponse,
)
from fakey.models.text_analysis import ReverseSearchResult, TextAnalysisResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/analysis", tags=["analysis"])


@router.post("/media", response_model=AnalysisResult, status_code=200)
@limiter.limit("20/minute")
async def analyze_media(request: Request, payload: MediaAnalysisRequest):
    """
    Run the forensic analysis on an uploaded media file.

    The verdict is REAL or LIKELY_FAKE after local reconciliation of Gemini's
    label with its deepfake probability (see ai/verdict_policy.py).
    """
    data = base64.b64decode(payload.media_b64)
    mime_type = payload.mime_type or mime_from_filename(payload.filename)
    return await forensics_service.analyze_media(data, mime_type, payload.metadata)


@router.post("/text", response_model=TextAnalysisResult, status_code=200)
@limiter.limit("30/minute")
async def analyze_text(request: Request, payload: TextAnalysisRequest):
    """AI_DETECT scores authorship; FACT_CHECK verifies claims and returns sources."""
    return await forensics_service.analyze_text(payload.text, payload.mode)


@router.post("/reverse-search", response_model=ReverseSearchResult, status_code=200)
@limiter.limit("20/minute")
async def reverse_search(request: Request, payload: ReverseSearchRequest):
    data = base64.b64decode(payload.image_b64)
    mime_type = payload.mime_type or mime_from_filename(payload.filename)
    return await forensics_service.reverse_signal_grounding(data, mime_type)


@router.post("/transcribe", response_model=TranscriptionResponse, status_code=200)
@limiter.limit("30/minute")
async def transcribe(request: Request, payload: TranscriptionRequest):
    text = await forensics_service.transcribe_audio(base64.b64decode(payload.audio_b64))
    return TranscriptionResponse(text=text)


@router.post("/report", response_class=PlainTextResponse, status_code=200)
@limiter.limit("20/minute")
async def forensic_report(request: Request, payload: ReportRequest):
    """Returns text/plain so the client can save it straight to a .txt file."""
    report = await forensics_service.generate_forensic_report(payload.result)
    return PlainTextResponse(report)
