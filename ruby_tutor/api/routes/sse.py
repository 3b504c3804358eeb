"""SSE Wiring — headers, line formatting and error framing for streamed endpoints.

Invariants:
    - Every stream ends with exactly one `done` event (error=True after a failure)
    - RubyError mid-stream -> its to_sse_event(); anything else -> generic INTERNAL_ERROR event
    - Client disconnects (CancelledError) end the stream quietly
"""

import asyncio
import json
import logging
from typing import AsyncIterator

from fastapi.responses import StreamingResponse

from ruby_tutor.core.errors import ErrorSeverity, RubyError

logger = logging.getLogger(__name__)

# Prevent proxy/browser buffering of streamed events.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


def sse_line(event: dict) -> str:
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


def done_event(error: bool = False) -> dict:
    return {"type": "done", "data": {"error": error}}


async def _framed(events: AsyncIterator[dict], label: str) -> AsyncIterator[str]:
    try:
        async for event in events:
            yield sse_line(event)
    except asyncio.CancelledError:
        logger.info(f"Client disconnected from {label} stream")
        return
    except RubyError as e:
        logger.warning(
            f"{label} stream failed: {e.message}", extra={"error_code": e.code},
        )
        yield sse_line(e.to_sse_event())
        yield sse_line(done_event(error=True))
        return
    except Exception as e:
        logger.error(f"{label} stream crashed: {e}", exc_info=True)
        yield sse_line({
            "type": "error",
            "data": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "severity": ErrorSeverity.CRITICAL.value,
                "recoverable": False,
            },
        })
        yield sse_line(done_event(error=True))
        return
    yield sse_line(done_event())


def event_stream(events: AsyncIterator[dict], label: str) -> StreamingResponse:
    return StreamingResponse(
        _framed(events, label),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
