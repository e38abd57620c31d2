"""
test_operation_poller.py — Long-running operation polling (Veo video jobs).

`sleep` is injected so no test actually waits 10 seconds.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fakey.ai.operation_poller import poll_operation, resolve_video_uri
from fakey.core.errors import OperationTimeoutError, VideoGenerationError


def _done(uri="https://files/video.mp4"):
    return {"name": "operations/v1", "done": True,
            "response": {"generated_videos": [{"video": {"uri": uri}}]}}


class TestPollOperation:

    async def test_two_requeries_then_done(self):
        first = {"name": "operations/v1", "done": False}
        refresh = AsyncMock(side_effect=[{"name": "operations/v1", "done": False}, _done()])
        sleep = AsyncMock()

        final = await poll_operation(first, refresh, sleep=sleep)

        assert refresh.await_count == 2
        assert sleep.await_count == 2
        sleep.assert_awaited_with(10.0)
        assert resolve_video_uri(final) == "https://files/video.mp4"

    async def test_already_done_is_not_requeried(self):
        refresh = AsyncMock()
        sleep = AsyncMock()

        final = await poll_operation(_done(), refresh, sleep=sleep)

        assert final["done"] is True
        refresh.assert_not_awaited()
        sleep.assert_not_awaited()

    async def test_custom_interval(self):
        refresh = AsyncMock(return_value=_done())
        sleep = AsyncMock()

        await poll_operation({"done": False}, refresh, interval=0.5, sleep=sleep)

        sleep.assert_awaited_once_with(0.5)

    async def test_refresh_error_propagates_immediately(self):
        refresh = AsyncMock(side_effect=RuntimeError("503 from status endpoint"))

        with pytest.raises(RuntimeError, match="503"):
            await poll_operation({"done": False}, refresh, sleep=AsyncMock())

        assert refresh.await_count == 1

    async def test_max_attempts_bounds_polling(self):
        refresh = AsyncMock(return_value={"done": False})

        with pytest.raises(OperationTimeoutError) as exc_info:
            await poll_operation({"done": False}, refresh, max_attempts=3, sleep=AsyncMock())

        assert refresh.await_count == 3
        assert exc_info.value.attempts == 3

    async def test_sdk_style_operation(self):
        running = SimpleNamespace(name="operations/v2", done=None)
        finished = SimpleNamespace(name="operations/v2", done=True, response=None, error=None)

        final = await poll_operation(running, AsyncMock(return_value=finished), sleep=AsyncMock())

        assert final is finished

    async def test_cancelling_the_task_stops_polling(self):
        refresh = AsyncMock(return_value={"done": False})
        task = asyncio.create_task(poll_operation({"done": False}, refresh, interval=60))
        await asyncio.sleep(0)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        refresh.assert_not_awaited()


class TestResolveVideoUri:

    def test_uri_from_sdk_objects(self):
        operation = SimpleNamespace(
            done=True,
            response=SimpleNamespace(generated_videos=[SimpleNamespace(video=SimpleNamespace(uri="https://v"))]),
        )
        assert resolve_video_uri(operation) == "https://v"

    @pytest.mark.parametrize(
        "operation",
        [
            {"done": True},
            {"done": True, "response": {"generated_videos": []}},
            {"done": True, "response": {"generated_videos": [{"video": {}}]}},
            {"done": True, "error": {"code": 400, "message": "prompt blocked"}},
        ],
    )
    def test_missing_uri_is_a_hard_failure(self, operation):
        with pytest.raises(VideoGenerationError, match="URI not found"):
            resolve_video_uri(operation)
