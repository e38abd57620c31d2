"""
operation_poller.py — Wait for a long-running Gemini operation (Veo video jobs).

The first handle comes back from generate_videos() either already done or
still running. While it is running we sleep for a fixed interval and ask for
its status again with `refresh`. Errors raised by `refresh` end the loop
immediately; nothing is retried here.

Bounding: `max_attempts=None` polls until the job finishes. Pass an integer
to give up with OperationTimeoutError after that many status checks.
Cancelling the awaiting task stops the loop at the next await point.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from fakey.ai.normalizer import pick, pick_path
from fakey.core.errors import OperationTimeoutError, VideoGenerationError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0


async def poll_operation(
    operation: Any,
    refresh: Callable[[Any], Awaitable[Any]],
    *,
    interval: float = DEFAULT_POLL_INTERVAL,
    max_attempts: Optional[int] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Any:
    """Return the first handle that reports done=True."""
    attempts = 0
    while not pick(operation, "done", False):
        if max_attempts is not None and attempts >= max_attempts:
            logger.warning("Operation %s not done after %d checks, giving up",
                           pick(operation, "name", "<unnamed>"), attempts)
            raise OperationTimeoutError(attempts)
        await sleep(interval)
        operation = await refresh(operation)
        attempts += 1
        logger.debug("Polled operation %s (check %d, done=%s)",
                     pick(operation, "name", "<unnamed>"), attempts, pick(operation, "done", False))

    logger.info("Operation %s done after %d status checks", pick(operation, "name", "<unnamed>"), attempts)
    return operation


def resolve_video_uri(operation: Any) -> str:
    """Download URI of the first generated video, or VideoGenerationError."""
    uri = pick_path(operation, "response", "generated_videos", 0, "video", "uri")
    if not isinstance(uri, str) or not uri:
        error = pick(operation, "error")
        if error:
            logger.error("Video operation finished with error: %s", error)
        raise VideoGenerationError("Video generation failed or URI not found.")
    return uri
