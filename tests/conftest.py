import io
import os

import pytest


class FakeAsyncSource:
    """ In-memory async byte source recording every read, optionally failing
    on a given read or returning short reads
    """

    def __init__(self, data: bytes, fail_on_read: int = 0, max_read: int = 0, fail_on_seek_end: bool = False):
        self.file = io.BytesIO(data)
        self.fail_on_read = fail_on_read
        self.max_read = max_read
        self.fail_on_seek_end = fail_on_seek_end
        self.reads: list[tuple[int, int]] = []
        self.closed = False

    async def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        if whence == os.SEEK_END and self.fail_on_seek_end:
            raise OSError("seek failed")
        return self.file.seek(offset, whence)

    async def read(self, size: int = -1) -> bytes:
        self.reads.append((self.file.tell(), size))
        if self.fail_on_read and len(self.reads) == self.fail_on_read:
            raise OSError("read failed")
        if self.max_read:
            size = min(size, self.max_read)
        return self.file.read(size)


@pytest.fixture
def make_source():
    return FakeAsyncSource


@pytest.fixture
def write_file(tmp_path):
    def _write_file(name: str, content: bytes):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return _write_file
