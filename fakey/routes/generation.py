"""
generation.py — Synthetic media generation endpoints.

Routes:
  POST /api/v1/generate/image — Gemini image model, returns a PNG data URI
  POST /api/v1/generate/video — Veo job, polled until done, returns video/mp4 bytes

The video route holds the request open while the job runs (typically one to
a few minutes; status is checked every VIDEO_POLL_INTERVAL_SECONDS). A model
that returns no image / no video URI is reported as 502.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, Response

from fakey.ai.forensics import forensics_service
from fakey.core.errors import GenerationError
from fakey.core.rate_limit import limiter
from fakey.models.requests import (
    ImageGenerationRequest,
    ImageGenerationResponse,
    VideoGenerationRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/generate", tags=["generate"])


@router.post("/image", response_model=ImageGenerationResponse, status_code=200)
@limiter.limit("10/minute")
async def generate_image(request: Request, payload: ImageGenerationRequest):
    try:
        data_uri = await forensics_service.generate_synthetic_image(payload.prompt, payload.aspect_ratio)
    except GenerationError as exc:
        logger.warning("Image generation produced no image: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return ImageGenerationResponse(data_uri=data_uri)


@router.post("/video", status_code=200)
@limiter.limit("2/minute")
async def generate_video(request: Request, payload: VideoGenerationRequest):
    try:
        video = await forensics_service.generate_synthetic_video(payload.prompt)
    except GenerationError as exc:
        logger.warning("Video generation failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return Response(content=video.data, media_type=video.mime_type)
