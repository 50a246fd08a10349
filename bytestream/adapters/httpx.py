"""httpx adapter for bytestream.

This module exposes the body of a streamed httpx response as a readable
stream, so it can be wrapped in a Payload or piped through a codec.
"""

from __future__ import annotations

from typing import AsyncIterator

import httpx

from bytestream.exceptions import PendingReadError, StreamError
from bytestream.interfaces import ICancellation, IReadableStream


class ResponseBodyStream(IReadableStream):
    """Readable stream over the body of a streamed httpx response.

    The response is closed once its body is exhausted or fails.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     request = client.build_request("GET", url)
        ...     response = await client.send(request, stream=True)
        ...     payload = Payload(ResponseBodyStream(response))
        ...     body = await payload.buffer()
    """

    def __init__(self, response: httpx.Response, chunk_size: int | None = None) -> None:
        """Initialize the stream.

        Args:
            response: A response sent with stream=True whose body is unread.
            chunk_size: Size of the chunks returned, or None for the chunks as
                they arrive.
        """
        self._response = response
        self._iterator: AsyncIterator[bytes] | None = response.aiter_bytes(chunk_size)
        self._pending = False

    @property
    def response(self) -> httpx.Response:
        return self._response

    async def read(self, cancellation: ICancellation | None = None) -> bytes | None:
        if self._pending:
            raise PendingReadError()

        if self._iterator is None:
            return None

        if cancellation is not None:
            cancellation.throw_if_requested()

        self._pending = True
        try:
            return await self._iterator.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            return None
        except httpx.HTTPError as exc:
            await self.aclose()
            raise StreamError(f"Reading the response body failed: {exc}") from exc
        finally:
            self._pending = False

    def is_readable(self) -> bool:
        return self._iterator is not None

    async def aclose(self) -> None:
        """Close the response without reading the rest of its body."""
        self._iterator = None
        await self._response.aclose()
