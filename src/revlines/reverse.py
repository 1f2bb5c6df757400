import typer
from contextlib import aclosing
from pathlib import Path

from . import common_args as ca
from .errors import RevLinesError
from .file_utils import find_log_files, read_file_reverse
from .utils import report_failure, run_command

reverser = typer.Typer(help="Print files line by line, last line first")


async def print_files_reversed(
        log_paths: list[Path],
        max_lines: int = 0,
        chunk_size: int = ca.CHUNK_SIZE,
        encoding: str = ca.ENCODING) -> bool:
    """ Print every line of every file in reverse order, stopping after
    max_lines lines overall (if set). Returns False if any file failed
    """
    ok = True
    printed = 0
    for file_path in find_log_files(log_paths):
        try:
            async with aclosing(read_file_reverse(file_path, chunk_size, encoding)) as lines:
                async for line in lines:
                    print(line)
                    printed += 1
                    if max_lines and printed >= max_lines:
                        return ok
        except BrokenPipeError:
            raise
        except (RevLinesError, OSError, UnicodeDecodeError) as e:
            report_failure(file_path, e)
            ok = False
    return ok


@reverser.callback(invoke_without_command=True)
def tac(
        log_path: ca.LogPathOpt,
        max_lines: ca.MaxLinesArg = 0,
        chunk_size: ca.ChunkSizeArg = ca.CHUNK_SIZE,
        encoding: ca.EncodingArg = ca.ENCODING,
):
    """ Print the lines of each file (or each file under a directory) in reverse
    order, without reading whole files into memory
    """
    run_command(print_files_reversed(log_path, max_lines, chunk_size, encoding))
