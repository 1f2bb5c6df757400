import asyncio
import logging
import sys
from collections.abc import Coroutine
from typing import Any

import typer

from .errors import RevLinesError

logger = logging.getLogger(__name__)


def configure_logging(level_name: str, verbose: int = 0):
    """ Set up root logging from a level name, lowered by 10 per -v flag """
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level '{level_name}'")
    logging.basicConfig(
        level=max(logging.DEBUG, level - 10 * verbose),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def report_failure(target: Any, error: Exception):
    """ Log a file that couldn't be read, with the underlying cause if there is one """
    cause = error.__cause__
    if isinstance(error, RevLinesError) and cause is not None:
        logger.error("Unable to read %s: %s (%s)", target, error, cause)
    else:
        logger.error("Unable to read %s: %s", target, error)


def run_command(command: Coroutine[Any, Any, bool]):
    """ Run an async command to completion. The command returns whether every
    input was read successfully; a closed stdout (e.g. piping into `head`) ends
    the output quietly
    """
    try:
        ok = asyncio.run(command)
    except BrokenPipeError:
        sys.stderr.close()
        return
    except KeyboardInterrupt:
        raise typer.Exit(code=130)
    if not ok:
        raise typer.Exit(code=1)
