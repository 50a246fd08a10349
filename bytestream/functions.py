"""Stream helper functions for bytestream."""

from __future__ import annotations

from bytestream.interfaces import ICancellation, IReadableStream, IWritableStream


async def pipe(
    source: IReadableStream,
    destination: IWritableStream,
    cancellation: ICancellation | None = None,
) -> int:
    """Copy every chunk of a source into a destination.

    The destination is not ended, so several sources can be piped into it.

    Args:
        source: The stream to read from until its end.
        destination: The stream each chunk is written to.
        cancellation: Optional token governing each read.

    Returns:
        The number of bytes copied.
    """
    written = 0
    while (chunk := await source.read(cancellation)) is not None:
        written += len(chunk)
        await destination.write(chunk)
    return written


async def buffer(source: IReadableStream, cancellation: ICancellation | None = None) -> bytes:
    """Read a source until its end and return everything it produced."""
    chunks = []
    while (chunk := await source.read(cancellation)) is not None:
        chunks.append(chunk)
    return b"".join(chunks)
