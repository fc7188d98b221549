"""
Streamed JSON array responses for list and search endpoints.
Results are written as they arrive from the store instead of being collected first.
"""

from collections.abc import AsyncGenerator, AsyncIterator

from fastapi.responses import StreamingResponse
from pydantic import BaseModel


async def stream_json_array(items: AsyncGenerator[BaseModel, None]) -> StreamingResponse:
    """Serialize an async sequence of models as one JSON array.

    The first item is awaited before the response starts, so a store failure
    on the initial query still reaches the exception handlers and maps to a
    status code. Failures after that abort the stream. The source is closed
    when the body finishes or is closed early (client gone), which releases
    any scroll context it holds.
    """
    try:
        first = await anext(items)
    except StopAsyncIteration:
        first = None

    async def body() -> AsyncIterator[bytes]:
        try:
            if first is None:
                yield b"[]"
                return
            yield b"[" + first.model_dump_json().encode()
            async for item in items:
                yield b"," + item.model_dump_json().encode()
            yield b"]"
        finally:
            await items.aclose()

    return StreamingResponse(body(), media_type="application/json")
