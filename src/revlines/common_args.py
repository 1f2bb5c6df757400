import codecs
import typer
from dotenv import load_dotenv, find_dotenv
from pathlib import Path
from typing import Annotated
from os import environ

load_dotenv(find_dotenv(usecwd=True))

# Bytes read per backward seek. Bigger chunks mean fewer reads but a bigger
# pending buffer per fetch
CHUNK_SIZE = 4096
# Want to read a lot of a compressed file into memory at once since decompression
# is expensive time-wise
COMPRESSED_CHUNK_SIZE = 4 * 1024 * 1024
ENCODING = "utf-8"
MAX_SEARCH_DEPTH = 999

LOG_LEVEL = environ.get('LOG_LEVEL', 'WARNING').upper()


def check_encoding(value: str) -> str:
    try:
        codecs.lookup(value)
    except LookupError:
        raise typer.BadParameter(f"Unknown encoding '{value}'")
    return value


LogPathOpt = Annotated[list[Path], typer.Argument(help="Path to the file(s) or directories to read backward")]
MaxLinesArg = Annotated[int, typer.Option(help="Max number of lines to seek backwards (0 for no limit)")]
ChunkSizeArg = Annotated[int, typer.Option(min=1, help="Number of bytes to read from a file at once", envvar="CHUNK_SIZE")]
EncodingArg = Annotated[str, typer.Option(help="Encoding used to decode lines", envvar="LOG_ENCODING", callback=check_encoding)]
VerboseArg = Annotated[int, typer.Option("-v", "--verbose", count=True, help="Increase logging verbosity (repeatable)")]
