import codecs
import logging
from typing import Any

from . import common_args as ca
from .byte_source import as_async_source, unwrap_text_file
from .chunk_cursor import ChunkCursor, query_length
from .errors import InvalidStateError, RevLinesError
from .line_assembler import AssemblerState, LineAssembler

logger = logging.getLogger(__name__)


class RevLines:
    """ Async iterator over the lines of a seekable stream, last line first.

    Blocks of `chunk_size` bytes are read backward from the end of the stream
    only when the next line can't be assembled from the bytes already read, so
    abandoning the iteration early never reads more of the stream than needed.
    The stream is left open, closing it is up to the caller.

        async with aiofiles.open(path, 'rb') as f:
            async for line in await RevLines.open(f):
                print(line)

    Lines are decoded with `encoding` (raw bytes when encoding is None).
    """

    def __init__(self, cursor: ChunkCursor, encoding: str | None = ca.ENCODING, errors: str = "strict"):
        self.cursor = cursor
        self.assembler = LineAssembler()
        self.encoding = encoding
        self.errors = errors
        self._failed = False

    @classmethod
    async def open(
            cls,
            source: Any,
            chunk_size: int = ca.CHUNK_SIZE,
            encoding: str | None = ca.ENCODING,
            errors: str = "strict") -> "RevLines":
        """ Build a reverse line iterator over `source`, which may be an async
        byte source (awaitable seek/read), a binary file object or a text file
        wrapper (its underlying binary buffer is read)
        """
        if encoding is not None:
            codecs.lookup(encoding)
        async_source = as_async_source(unwrap_text_file(source))
        length = await query_length(async_source)
        logger.debug("Reading %r backward: %d bytes in chunks of %d", source, length, chunk_size)
        return cls(ChunkCursor(async_source, length=length, chunk_size=chunk_size), encoding, errors)

    def __aiter__(self):
        return self

    async def __anext__(self) -> str | bytes:
        if self._failed:
            raise InvalidStateError("The sequence already failed, no more lines can be read from it")
        try:
            line = await self._next_line()
        except RevLinesError:
            self._failed = True
            raise

        if line is None:
            logger.debug("Reached the start of %r", self.cursor.source)
            raise StopAsyncIteration
        if self.encoding is None:
            return line
        return line.decode(self.encoding, self.errors)

    async def _next_line(self) -> bytes | None:
        assembler = self.assembler
        while True:
            line = assembler.pop_line()
            if line is not None:
                return line
            if assembler.state is AssemblerState.EXHAUSTED:
                return None

            block = await self.cursor.fetch_previous_block()
            if block is None:
                return assembler.finish()
            assembler.push_block(block)
