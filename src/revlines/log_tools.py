import re
import typer
from typing import Annotated
from contextlib import aclosing
from dataclasses import dataclass, field
from pathlib import Path

from . import common_args as ca
from .errors import RevLinesError
from .file_utils import find_log_files, read_file_reverse
from .log_utils import FilterMode, line_matches
from .utils import report_failure, run_command

filterer = typer.Typer(help="Find the most recent lines matching a set of patterns")


@dataclass
class LineFilteringConfig:
    """ Data class for passing the filtering arguments around, along with the
    helpers deciding when a backward scan can stop
    """
    filters: list[str]
    filter_mode: FilterMode = FilterMode.RAW
    max_matches: int = 1
    max_lines: int = 0
    chunk_size: int = ca.CHUNK_SIZE
    encoding: str = ca.ENCODING

    # Stateful counters shared across every scanned file
    scanned_lines: int = field(default=0, init=False)
    matched_lines: int = field(default=0, init=False)

    def matches(self, line: str) -> bool:
        return line_matches(line, self.filters, self.filter_mode)

    def done_iterating(self) -> bool:
        """ Whether enough lines were matched or scanned to stop reading """
        return bool(
            (self.max_matches and self.matched_lines >= self.max_matches)
            or (self.max_lines and self.scanned_lines >= self.max_lines))


async def print_matching_lines(log_paths: list[Path], cfg: LineFilteringConfig) -> bool:
    """ Scan the given files backward, printing matching lines most recent first.
    Files are scanned in the given order, so list the newest file first.
    Returns False if any file failed
    """
    ok = True
    for file_path in find_log_files(log_paths):
        try:
            async with aclosing(read_file_reverse(file_path, cfg.chunk_size, cfg.encoding)) as lines:
                async for line in lines:
                    cfg.scanned_lines += 1
                    if cfg.matches(line):
                        print(line)
                        cfg.matched_lines += 1
                    if cfg.done_iterating():
                        return ok
        except BrokenPipeError:
            raise
        except (RevLinesError, OSError, UnicodeDecodeError) as e:
            report_failure(file_path, e)
            ok = False
    return ok


@filterer.callback(invoke_without_command=True)
def filter_lines(
        log_path: ca.LogPathOpt,
        filters: Annotated[list[str], typer.Option("-f", "--filters", help="Patterns that should appear in the lines")] = [],
        filter_mode: Annotated[FilterMode, typer.Option("-m", "--filter-mode", help="String comparison mode to use for filtering lines")] = FilterMode.RAW,
        max_matches: Annotated[int, typer.Option("-n", "--max-matches", help="Number of matching lines to print (0 for all of them)")] = 1,
        max_lines: ca.MaxLinesArg = 0,
        chunk_size: ca.ChunkSizeArg = ca.CHUNK_SIZE,
        encoding: ca.EncodingArg = ca.ENCODING,
):
    """ Print the most recent lines matching every filter, reading the files
    backward so that only their tail is read when matches are recent
    """
    if filter_mode == FilterMode.REGEX:
        for pattern in filters:
            try:
                re.compile(pattern)
            except re.error as e:
                raise typer.BadParameter(f"Invalid regular expression '{pattern}': {e}", param_hint="'--filters'")

    filter_config = LineFilteringConfig(
        filters,
        filter_mode,
        max_matches,
        max_lines,
        chunk_size,
        encoding)

    run_command(print_matching_lines(log_path, filter_config))
