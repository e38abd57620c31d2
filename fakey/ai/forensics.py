"""
forensics.py — Every FAKEY.AI operation, end to end.

Each method follows the same path:

  request_builder.build_*()  →  GeminiClient  →  (video: operation_poller)
        →  normalizer / verdict_policy / grounding  →  typed result

Hard failures (no image returned, no video URI, SDK/transport errors) raise.
Soft failures never do: malformed JSON is normalized to defaults and empty
report/transcript text is replaced by a fixed fallback string.

Each call is independent; the service holds no per-request state, so any
number of analyses can run concurrently on the shared singleton.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fakey.ai.gemini_client import GeminiClient, gemini_client
from fakey.ai.grounding import DEFAULT_SOURCE_TITLE, extract_sources
from fakey.ai.normalizer import (
    normalize_media_analysis,
    normalize_reverse_search,
    normalize_text_analysis,
)
from fakey.ai.operation_poller import poll_operation, resolve_video_uri
from fakey.ai.request_builder import (
    build_chat_request,
    build_image_request,
    build_media_analysis_request,
    build_report_request,
    build_reverse_search_request,
    build_text_analysis_request,
    build_transcription_request,
    build_video_request,
)
from fakey.core.config import Settings, settings
from fakey.core.errors import ImageGenerationError
from fakey.models.analysis import AnalysisResult
from fakey.models.text_analysis import ReverseSearchResult, TextAnalysisMode, TextAnalysisResult

logger = logging.getLogger(__name__)

REPORT_FALLBACK = "Failed to generate text report."
TRANSCRIPT_FALLBACK = "Transcription failed."
TEXT_SOURCE_TITLE = "Source"


# ── MIME type helper ──────────────────────────────────────────────────────────

_MIME_MAP = {
    ".jpg":  "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png":  "image/png",
    ".webp": "image/webp",
    ".gif":  "image/gif",
    ".mp3":  "audio/mpeg",
    ".wav":  "audio/wav",
    ".ogg":  "audio/ogg",
    ".m4a":  "audio/mp4",
    ".mp4":  "video/mp4",
    ".webm": "video/webm",
    ".mov":  "video/quicktime",
    ".avi":  "video/x-msvideo",
}


def mime_from_filename(filename: str) -> str:
    """Derive a MIME type from a filename extension."""
    ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return _MIME_MAP.get(ext, "application/octet-stream")


@dataclass(frozen=True)
class GeneratedVideo:
    uri: str
    data: bytes
    mime_type: str = "video/mp4"


class ForensicsService:
    """Media forensics, text checks and synthetic media generation via Gemini."""

    def __init__(self, client: Optional[GeminiClient] = None, config: Settings = settings) -> None:
        self.client = client if client is not None else gemini_client
        self.settings = config

    # ── Generation ────────────────────────────────────────────────────────────

    async def generate_synthetic_image(self, prompt: str, aspect_ratio: str = "1:1") -> str:
        """Return the first generated image as a data:image/png;base64 URI."""
        reply = await self.client.generate(build_image_request(prompt, aspect_ratio), response_key="image")
        if not reply.images:
            raise ImageGenerationError("No image data returned from model")
        return "data:image/png;base64," + base64.b64encode(reply.images[0]).decode()

    async def generate_synthetic_video(self, prompt: str) -> GeneratedVideo:
        """Submit a Veo job, poll it to completion, then download the video."""
        logger.info("Starting video generation (prompt=%d chars)", len(prompt))
        operation = await self.client.start_video(build_video_request(prompt))
        operation = await poll_operation(
            operation,
            self.client.refresh_operation,
            interval=self.settings.video_poll_interval_seconds,
            max_attempts=self.settings.video_poll_max_attempts,
        )
        uri = resolve_video_uri(operation)
        data = await self.client.download(uri)
        logger.info("Video generation complete (%d bytes)", len(data))
        return GeneratedVideo(uri=uri, data=data)

    async def generate_forensic_report(self, result: AnalysisResult) -> str:
        """Plain-text case report for the given analysis; never raises on empty output."""
        reply = await self.client.generate(build_report_request(result), response_key="report")
        return reply.text or REPORT_FALLBACK

    # ── Analysis ──────────────────────────────────────────────────────────────

    async def reverse_signal_grounding(self, data: bytes, mime_type: str) -> ReverseSearchResult:
        """Trace an image back to its original source with Google Search grounding."""
        reply = await self.client.generate(
            build_reverse_search_request(data, mime_type), response_key="reverse_search"
        )
        sources = extract_sources(reply.grounding_chunks, DEFAULT_SOURCE_TITLE)
        return normalize_reverse_search(reply.text, sources)

    async def analyze_media(
        self,
        data: bytes,
        mime_type: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> AnalysisResult:
        logger.info("Starting media analysis (mime=%s, size=%d bytes)", mime_type, len(data))
        reply = await self.client.generate(
            build_media_analysis_request(data, mime_type), response_key="media_analysis"
        )
        result = normalize_media_analysis(reply.text, metadata)
        logger.info(
            "Media analysis complete: case=%s verdict=%s probability=%d confidence=%d",
            result.id, result.verdict.value, result.deepfake_probability, result.confidence,
        )
        return result

    async def analyze_text(self, text: str, mode: TextAnalysisMode) -> TextAnalysisResult:
        """AI-authorship detection, or claim verification with search sources in FACT_CHECK."""
        is_fact_check = mode == TextAnalysisMode.FACT_CHECK
        reply = await self.client.generate(
            build_text_analysis_request(text, mode),
            response_key="fact_check" if is_fact_check else "ai_detect",
        )
        sources = extract_sources(reply.grounding_chunks, TEXT_SOURCE_TITLE) if is_fact_check else []
        return normalize_text_analysis(reply.text, sources)

    async def transcribe_audio(self, audio: bytes) -> str:
        reply = await self.client.generate(build_transcription_request(audio), response_key="transcription")
        return reply.text or TRANSCRIPT_FALLBACK

    # ── Assistant ─────────────────────────────────────────────────────────────

    def start_assistant_chat(self) -> Any:
        """New stateful assistant session (persona, Google Search, fixed thinking budget)."""
        return self.client.create_chat(build_chat_request())


# Module-level singleton
forensics_service = ForensicsService()
