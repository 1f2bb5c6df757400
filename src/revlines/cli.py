import typer

from . import common_args as ca
from .log_tools import filterer
from .reverse import reverser
from .utils import configure_logging


app = typer.Typer()
app.add_typer(reverser, name="tac")
app.add_typer(filterer, name="filter")


@app.callback()
def main(verbose: ca.VerboseArg = 0):
    """ Read files backward, last line first """
    configure_logging(ca.LOG_LEVEL, verbose)


if __name__ == '__main__':
    app()
