"""Tests for the httpx response body adapter."""

from __future__ import annotations

import base64

import httpx
import pytest

from bytestream import Base64EncodingReadableStream, Payload, StreamError, buffer
from bytestream.adapters import ResponseBodyStream

BODY = b"The quick brown fox jumps over the lazy dog"


def handler(request: httpx.Request) -> httpx.Response:
    """Serve a fixed body on every path."""
    return httpx.Response(200, content=BODY)


async def open_body(client: httpx.AsyncClient, chunk_size: int | None = None) -> ResponseBodyStream:
    """Send a streamed request and wrap its body."""
    request = client.build_request("GET", "https://example.test/body")
    response = await client.send(request, stream=True)
    return ResponseBodyStream(response, chunk_size)


@pytest.mark.asyncio
async def test_response_body_is_read_in_chunks() -> None:
    """Test that a streamed response body is read in chunks and then closed."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        stream = await open_body(client, chunk_size=8)

        chunks = []
        while (chunk := await stream.read()) is not None:
            chunks.append(chunk)

        assert b"".join(chunks) == BODY
        assert all(len(chunk) <= 8 for chunk in chunks)
        assert not stream.is_readable()
        assert stream.response.is_closed
        assert await stream.read() is None


@pytest.mark.asyncio
async def test_payload_buffers_response_body() -> None:
    """Test that a payload can read and buffer a response body."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        payload = Payload(await open_body(client, chunk_size=5))

        assert await payload.read() == BODY[:5]
        assert await payload.buffer() == BODY[5:]


@pytest.mark.asyncio
async def test_response_body_can_be_encoded() -> None:
    """Test that a response body can be encoded while reading."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        stream = Base64EncodingReadableStream(await open_body(client, chunk_size=4))

        assert await buffer(stream) == base64.b64encode(BODY)


@pytest.mark.asyncio
async def test_response_body_failure_is_a_stream_error() -> None:
    """Test that transport failures while reading raise StreamError."""

    class BrokenBody(httpx.AsyncByteStream):
        async def __aiter__(self):  # type: ignore[override]
            yield b"partial"
            raise httpx.ReadError("connection lost")

    def broken(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=BrokenBody())

    async with httpx.AsyncClient(transport=httpx.MockTransport(broken)) as client:
        stream = await open_body(client)

        assert await stream.read() == b"partial"
        with pytest.raises(StreamError):
            await stream.read()
        assert not stream.is_readable()
