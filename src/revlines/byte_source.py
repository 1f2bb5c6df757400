import asyncio
import inspect
import io
import os
from typing import Any, BinaryIO, Protocol


class AsyncByteSource(Protocol):
    """ Anything offering awaitable random-access seeks and bounded reads,
    e.g. an aiofiles handle opened in 'rb' mode
    """
    async def seek(self, offset: int, whence: int = os.SEEK_SET) -> int: ...

    async def read(self, size: int = -1) -> bytes: ...


def read_exactly(file: BinaryIO, offset: int, size: int) -> bytes:
    """ Seek to `offset` and read up to `size` bytes, stopping early only at EOF """
    file.seek(offset)
    block = bytearray()
    while len(block) < size:
        data = file.read(size - len(block))
        if not data:
            break
        block += data
    return bytes(block)


class ThreadedByteSource:
    """ Expose a regular (blocking) binary file as an AsyncByteSource by running
    its calls in a worker thread. read_at() seeks and reads a whole block in a
    single trip to the thread
    """

    def __init__(self, file: BinaryIO):
        self.file = file

    async def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return await asyncio.to_thread(self.file.seek, offset, whence)

    async def read(self, size: int = -1) -> bytes:
        return await asyncio.to_thread(self.file.read, size)

    async def read_at(self, offset: int, size: int) -> bytes:
        return await asyncio.to_thread(read_exactly, self.file, offset, size)

    def __repr__(self):
        return f"{type(self).__name__}({self.file!r})"


def unwrap_text_file(source: Any) -> Any:
    """ Return the binary buffer behind a text file, or the source untouched """
    if isinstance(source, io.TextIOWrapper):
        return source.buffer
    return source


def as_async_source(source: Any) -> AsyncByteSource:
    if inspect.iscoroutinefunction(source.seek) and inspect.iscoroutinefunction(source.read):
        return source
    return ThreadedByteSource(source)
