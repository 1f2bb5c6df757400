import gzip
import io
import logging
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import magic

from .common_args import CHUNK_SIZE, COMPRESSED_CHUNK_SIZE, ENCODING, MAX_SEARCH_DEPTH
from .rev_lines import RevLines

logger = logging.getLogger(__name__)


def open_possibly_compressed_file(file_path: Path) -> io.BufferedIOBase:
    """ Using python-magic, expose a plaintext or compressed file in
    read-binary mode via a unified interface
    """
    mime = magic.Magic(mime=True)
    file_type = mime.from_file(str(file_path))
    is_compressed = 'gzip' in file_type
    logger.debug("Opening %s (%s)", file_path, file_type)

    open_func = gzip.open if is_compressed else open

    return open_func(file_path, 'rb')


async def read_file_reverse(
        file_path: Path,
        chunk_size: int = CHUNK_SIZE,
        encoding: str | None = ENCODING) -> AsyncIterator[str | bytes]:
    """ Reads a regular or compressed (.gz) file line by line in reverse
    order, closing the file once iteration stops.

    Every backward seek into a compressed file restarts decompression from
    the start, so those are read with chunks of at least COMPRESSED_CHUNK_SIZE.
    """
    with open_possibly_compressed_file(file_path) as f:
        if isinstance(f, gzip.GzipFile):
            chunk_size = max(chunk_size, COMPRESSED_CHUNK_SIZE)
        async for line in await RevLines.open(f, chunk_size, encoding):
            yield line


async def read_files_reverse(
        file_paths: list[Path],
        chunk_size: int = CHUNK_SIZE,
        encoding: str | None = ENCODING) -> AsyncIterator[str | bytes]:
    """ Read each file backward, one after the other in the given order """
    for file_path in file_paths:
        async for line in read_file_reverse(file_path, chunk_size, encoding):
            yield line


def find_log_files(log_paths: list[Path], max_depth: int = MAX_SEARCH_DEPTH) -> Iterator[Path]:
    """
    Given a set of log paths or directories containing logs, and a max search depth, yield
    all individual files in those paths
    """
    for p in log_paths:
        # Non-directories pass through as is, missing files fail once read
        if not p.is_dir():
            yield p
            continue
        dirs: list[tuple[Path, int]] = [(p, 0)]
        while dirs:
            cur_dir, cur_depth = dirs.pop()
            for f in sorted(cur_dir.iterdir()):
                if f.is_file():
                    yield f
                elif f.is_dir() and cur_depth < max_depth:
                    dirs.append((f, cur_depth + 1))
