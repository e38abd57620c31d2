"""
GeminiClient — Async wrapper around the Google Gen AI SDK (google-genai).

Takes the immutable request values built in request_builder.py and turns
them into SDK calls:

  generate()          → client.aio.models.generate_content  (text / JSON / image)
  start_video()       → client.aio.models.generate_videos   (Veo, long-running)
  refresh_operation() → client.aio.operations.get
  create_chat()       → client.aio.chats.create
  download()          → httpx GET of a generated file URI (API key appended)

Supports two runtime modes (set via AI_MOCK_MODE env var):
  - MOCK mode (default): returns deterministic canned responses.
    Use for tests and local dev without API keys.
  - REAL mode: makes actual Gemini API calls.
    Requires GEMINI_API_KEY to be set.

Extension pattern: add new mock response keys to _MOCK_RESPONSES and
reference them in generate() calls via the response_key parameter.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
from google import genai
from google.genai import types

from fakey.ai.grounding import grounding_chunks
from fakey.ai.normalizer import pick, pick_path
from fakey.ai.request_builder import BlobPart, ModelRequest, TextPart, VideoRequest
from fakey.core.config import Settings, settings

logger = logging.getLogger(__name__)


@dataclass
class ModelReply:
    """The parts of a Gemini response the service layer uses."""

    text: str = ""
    images: list[bytes] = field(default_factory=list)
    grounding_chunks: list[Any] = field(default_factory=list)


# Canned responses for mock mode.
# Keys map to response_key arguments in generate() calls.
_MOCK_RESPONSES: dict[str, str] = {
    "default": (
        "[MOCK] This is a placeholder Gemini response. "
        "Set AI_MOCK_MODE=false and provide GEMINI_API_KEY for real responses."
    ),
    "media_analysis": (
        '{"verdict": "REAL", "deepfakeProbability": 18, "confidence": 72, '
        '"summary": "[MOCK] No synthetic manipulation indicators detected.", '
        '"userRecommendation": "No action needed, but verify the original source if shared widely.", '
        '"analysisSteps": {'
        '"integrity": {"score": 20, "explanation": "Compression history is consistent with a single save.", "confidenceQualifier": "Medium"}, '
        '"consistency": {"score": 15, "explanation": "Lighting and shadows agree across the frame.", "confidenceQualifier": "High"}, '
        '"aiPatterns": {"score": 22, "explanation": "No GAN grid artifacts in uniform regions.", "confidenceQualifier": "Medium"}, '
        '"temporal": {"score": 10, "explanation": "Not applicable to still images.", "confidenceQualifier": "Low"}}, '
        '"explanations": [{"point": "Natural skin texture", '
        '"detail": "Pore-level variation is present, inconsistent with diffusion smoothing.", '
        '"simpleDetail": "The skin looks like a real photo.", "category": "Visual"}], '
        '"manipulationType": "None detected", '
        '"guidance": "[MOCK] Mock mode active, no real analysis performed."}'
    ),
    "reverse_search": (
        '{"summary": "[MOCK] Earliest matching copy found on a wire-service photo page.", '
        '"originalEvent": "Press photo, original context unknown in mock mode", '
        '"manipulationDetected": false, "confidence": 60, '
        '"findings": [{"type": "Earliest Match", "detail": "Identical crop indexed on a news site."}]}'
    ),
    "ai_detect": (
        '{"aiProbability": 35, "verdictLabel": "LIKELY HUMAN", '
        '"aiSignals": ["Uniform sentence length"], '
        '"humanSignals": ["Idiomatic phrasing", "Specific personal detail"], '
        '"summary": "[MOCK] Mixed signals, leaning human-written.", '
        '"linguisticMarkers": ["Low burstiness"]}'
    ),
    "fact_check": (
        '{"claims": [{"claim": "[MOCK] The stated event took place.", "status": "UNVERIFIED", '
        '"sourceUrl": "", "category": "General"}], '
        '"isFactual": "MIXED", '
        '"summary": "[MOCK] No real verification performed, mock mode active."}'
    ),
    "report": (
        "====================\n"
        "FAKEY.AI FORENSIC REPORT [MOCK]\n"
        "====================\n"
        "1. CASE FILE ID: MOCK\n"
        "2. FINAL VERDICT: REAL\n"
        "3. AI-LIKELIHOOD SCORE: 18%\n"
        "4. TECHNICAL EVIDENCE LOG: mock mode, no evidence collected\n"
        "5. INVESTIGATOR GUIDANCE: verify manually\n"
        "6. SYSTEM SIGNATURE: FAKEY.AI/MOCK\n"
        "===================="
    ),
    "transcription": "[MOCK] This is a placeholder transcript.",
    "chat": "[MOCK] Forensic assistant reply. Set AI_MOCK_MODE=false for real answers.",
}

# Tiny transparent PNG returned by mock image generation.
_MOCK_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

_MOCK_GROUNDING = [
    {"web": {"title": "Reuters Fact Check", "uri": "https://www.reuters.com/fact-check/"}},
    {"web": {"title": "AP Fact Check", "uri": "https://apnews.com/hub/ap-fact-check"}},
]

_MOCK_VIDEO_URI = "https://generativelanguage.googleapis.com/v1beta/files/mock-video:download?alt=media"


def _to_parts(contents: tuple) -> list[types.Part]:
    parts = []
    for part in contents:
        if isinstance(part, BlobPart):
            parts.append(types.Part.from_bytes(data=part.data, mime_type=part.mime_type))
        elif isinstance(part, TextPart):
            parts.append(types.Part.from_text(text=part.text))
    return parts


def _to_config(request: ModelRequest) -> Optional[types.GenerateContentConfig]:
    config: dict[str, Any] = {}
    if request.system_instruction:
        config["system_instruction"] = request.system_instruction
    if request.response_mime_type:
        config["response_mime_type"] = request.response_mime_type
    if request.use_search:
        config["tools"] = [types.Tool(google_search=types.GoogleSearch())]
    if request.thinking_budget is not None:
        config["thinking_config"] = types.ThinkingConfig(thinking_budget=request.thinking_budget)
    if request.aspect_ratio:
        config["image_config"] = types.ImageConfig(aspect_ratio=request.aspect_ratio)
    return types.GenerateContentConfig(**config) if config else None


def _reply_from_response(response: Any) -> ModelReply:
    images = []
    for part in pick_path(response, "candidates", 0, "content", "parts", default=[]):
        data = pick_path(part, "inline_data", "data")
        if data:
            images.append(data if isinstance(data, bytes) else base64.b64decode(data))
    return ModelReply(
        text=pick(response, "text", ""),
        images=images,
        grounding_chunks=grounding_chunks(response),
    )


class _MockChat:
    """Stand-in for google.genai AsyncChat in mock mode."""

    def __init__(self, request: ModelRequest) -> None:
        self.request = request
        self.history: list[str] = []

    async def send_message(self, message: str) -> ModelReply:
        self.history.append(message)
        return ModelReply(text=_MOCK_RESPONSES["chat"], grounding_chunks=list(_MOCK_GROUNDING))


class GeminiClient:
    """
    Central Gemini interface for the FAKEY.AI backend.

    Credentials come from the Settings object passed in; nothing reads the
    environment at call time. Use the module-level `gemini_client` singleton
    unless a test or script needs its own configuration.
    """

    def __init__(self, config: Settings = settings) -> None:
        self.settings = config
        self.mock_mode = config.ai_mock_mode
        self._client: Optional[genai.Client] = None

        if not self.mock_mode:
            if not config.gemini_api_key:
                logger.warning(
                    "GEMINI_API_KEY not set, falling back to mock mode. "
                    "Set AI_MOCK_MODE=true to silence this warning."
                )
                self.mock_mode = True
            else:
                self._client = genai.Client(api_key=config.gemini_api_key)

        if self.mock_mode:
            logger.info("GeminiClient initialised in MOCK mode")
        else:
            logger.info("GeminiClient initialised in REAL mode")

    async def generate(self, request: ModelRequest, response_key: str = "default") -> ModelReply:
        """
        Run a single generate_content call.

        Args:
            request:      Built by one of the request_builder.build_* functions.
            response_key: Mock response key (ignored in real mode).

        Returns:
            ModelReply with the text, any inline images and grounding chunks.

        Raises:
            Exception: Propagates Gemini SDK errors in real mode.
        """
        if self.mock_mode:
            if request.aspect_ratio:
                return ModelReply(images=[_MOCK_PNG])
            return ModelReply(
                text=_MOCK_RESPONSES.get(response_key, _MOCK_RESPONSES["default"]),
                grounding_chunks=list(_MOCK_GROUNDING) if request.use_search else [],
            )

        try:
            response = await self._client.aio.models.generate_content(
                model=request.model.value,
                contents=_to_parts(request.contents),
                config=_to_config(request),
            )
        except Exception as exc:
            logger.error("Gemini API error (model=%s): %s", request.model.value, exc)
            raise
        return _reply_from_response(response)

    async def start_video(self, request: VideoRequest) -> Any:
        """Submit a Veo job and return its operation handle."""
        if self.mock_mode:
            return {
                "name": "operations/mock-video",
                "done": True,
                "response": {"generated_videos": [{"video": {"uri": _MOCK_VIDEO_URI}}]},
            }

        try:
            return await self._client.aio.models.generate_videos(
                model=request.model.value,
                prompt=request.prompt,
                config=types.GenerateVideosConfig(
                    number_of_videos=request.number_of_videos,
                    resolution=request.resolution,
                    aspect_ratio=request.aspect_ratio,
                ),
            )
        except Exception as exc:
            logger.error("Gemini video API error (model=%s): %s", request.model.value, exc)
            raise

    async def refresh_operation(self, operation: Any) -> Any:
        if self.mock_mode:
            return operation
        try:
            return await self._client.aio.operations.get(operation)
        except Exception as exc:
            logger.error("Gemini operation status error (%s): %s", pick(operation, "name"), exc)
            raise

    def create_chat(self, request: ModelRequest) -> Any:
        """Open a stateful chat; history lives in the returned handle."""
        if self.mock_mode:
            return _MockChat(request)
        return self._client.aio.chats.create(model=request.model.value, config=_to_config(request))

    async def download(self, uri: str) -> bytes:
        """Fetch a generated file; the Files API wants the key as a query param."""
        if self.mock_mode:
            return b"\x00\x00\x00\x18ftypmp42MOCK"

        url = httpx.URL(uri).copy_merge_params({"key": self.settings.gemini_api_key})
        async with httpx.AsyncClient(
            timeout=self.settings.video_download_timeout_seconds,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "Video download error: %s %s",
                    exc.response.status_code,
                    exc.response.text[:200],
                )
                raise
            except httpx.HTTPError as exc:
                logger.error("Video download failed: %s", exc)
                raise
        return response.content


# Module-level singleton, import and use this everywhere
gemini_client = GeminiClient()
