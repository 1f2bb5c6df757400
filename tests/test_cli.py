import gzip

import pytest
from typer.testing import CliRunner

from revlines.cli import app

runner = CliRunner()


@pytest.fixture
def log_file(write_file):
    return write_file("service.log", (
        b"INFO starting\n"
        b"ERROR disk full\n"
        b"INFO retrying\n"
        b"ERROR connection timeout\n"
        b"INFO done\n"
    ))


def test_tac(log_file):
    result = runner.invoke(app, ["tac", str(log_file), "--chunk-size", "4"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "INFO done",
        "ERROR connection timeout",
        "INFO retrying",
        "ERROR disk full",
        "INFO starting",
    ]


def test_tac_max_lines(log_file):
    result = runner.invoke(app, ["tac", str(log_file), "--max-lines", "2"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["INFO done", "ERROR connection timeout"]


def test_tac_chunk_size_from_environment(log_file):
    result = runner.invoke(app, ["tac", str(log_file)], env={"CHUNK_SIZE": "3"})

    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "INFO done"


def test_tac_missing_file(log_file, tmp_path):
    result = runner.invoke(app, ["tac", str(tmp_path / "missing.log"), str(log_file)])

    assert result.exit_code == 1


def test_filter_most_recent_match(log_file):
    result = runner.invoke(app, ["filter", str(log_file), "-f", "error"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["ERROR connection timeout"]


def test_filter_all_matches(log_file):
    result = runner.invoke(app, ["filter", str(log_file), "-f", "error", "-n", "0"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["ERROR connection timeout", "ERROR disk full"]


def test_filter_every_pattern_must_match(log_file):
    result = runner.invoke(app, ["filter", str(log_file), "-f", "error", "-f", "disk", "-n", "0"])

    assert result.stdout.splitlines() == ["ERROR disk full"]


def test_filter_regex(log_file):
    result = runner.invoke(app, ["filter", str(log_file), "-m", "regex", "-f", r"^INFO (start|retry)", "-n", "0"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["INFO retrying", "INFO starting"]


def test_filter_fuzzy(log_file):
    result = runner.invoke(app, ["filter", str(log_file), "-m", "fuzzy", "-f", "conection timout"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["ERROR connection timeout"]


def test_filter_max_lines_bounds_the_scan(log_file):
    result = runner.invoke(app, ["filter", str(log_file), "-f", "starting", "--max-lines", "3"])

    assert result.exit_code == 0
    assert result.stdout == ""


def test_verbose_flag(log_file):
    result = runner.invoke(app, ["-vv", "tac", str(log_file)])

    assert result.exit_code == 0
    assert "INFO done" in result.stdout


def test_tac_truncated_compressed_file(write_file, log_file):
    broken = write_file("broken.log.gz", gzip.compress(b"INFO old\n" * 100)[:-10])
    result = runner.invoke(app, ["tac", str(broken), str(log_file)])

    assert result.exit_code == 1
    assert "INFO done" in result.stdout


def test_filter_invalid_regex(log_file):
    result = runner.invoke(app, ["filter", str(log_file), "-m", "regex", "-f", "(unclosed"])

    assert result.exit_code == 2


def test_unknown_encoding(log_file):
    result = runner.invoke(app, ["tac", str(log_file), "--encoding", "no-such-codec"])

    assert result.exit_code == 2
