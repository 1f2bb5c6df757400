import logging
import os

from .byte_source import AsyncByteSource
from .errors import InvalidStateError, StreamIOError

logger = logging.getLogger(__name__)

# What file objects raise when they can't serve a call: OSError for I/O failures,
# ValueError once closed, EOFError for truncated gzip members
SOURCE_ERRORS = (OSError, ValueError, EOFError)


async def query_length(source: AsyncByteSource) -> int:
    """ Seek to the end of the source and return its size in bytes """
    try:
        return await source.seek(0, os.SEEK_END)
    except SOURCE_ERRORS as e:
        raise StreamIOError(f"Unable to determine the length of {source!r}") from e


class ChunkCursor:
    """ Walks a seekable byte source backward, handing out one block of at most
    `chunk_size` bytes per fetch until the start of the source is reached.
    Every byte is read exactly once.
    """

    def __init__(self, source: AsyncByteSource, *, length: int, chunk_size: int):
        if chunk_size < 1:
            raise ValueError(f"Chunk size must be a positive number of bytes, got {chunk_size}")
        if length < 0:
            raise InvalidStateError(f"Stream length can't be negative, got {length}")
        self.source = source
        self.chunk_size = chunk_size
        self._position = length

    @property
    def position(self) -> int:
        return self._position

    @property
    def exhausted(self) -> bool:
        return self._position == 0

    def _plan_read(self) -> tuple[int, int]:
        """ Return the (offset, size) of the next block to read """
        if self._position < 0:
            raise InvalidStateError(f"Scan position went negative ({self._position})")
        read_size = min(self.chunk_size, self._position)
        return self._position - read_size, read_size

    async def fetch_previous_block(self) -> bytes | None:
        """ Read the block right before the current scan position, or return
        None once the whole source has been consumed
        """
        if self.exhausted:
            return None

        offset, read_size = self._plan_read()
        logger.debug("Reading %d bytes at offset %d", read_size, offset)
        try:
            block = await self._read_at(offset, read_size)
        except SOURCE_ERRORS as e:
            raise StreamIOError(f"Unable to read {read_size} bytes at offset {offset}") from e

        # an early EOF means the source shrank underneath us
        if len(block) != read_size:
            raise StreamIOError(f"Expected {read_size} bytes at offset {offset}, got {len(block)}")

        self._position = offset
        return bytes(block)

    async def _read_at(self, offset: int, size: int) -> bytes:
        read_at = getattr(self.source, "read_at", None)
        if read_at is not None:
            return await read_at(offset, size)

        await self.source.seek(offset)
        block = bytearray()
        while len(block) < size:
            data = await self.source.read(size - len(block))
            if not data:
                break
            block += data
        return block
