#!/usr/bin/env python3

import logging

import pytest
from tests.utils import make_document

from camt_downgrade import cli
from camt_downgrade.config import ConverterConfig


@pytest.fixture
def statement_file(tmp_path):
    file = tmp_path / "statement.xml"
    file.write_bytes(make_document())
    return file


def test_main_converts(statement_file, capsys):
    assert cli.main([str(statement_file)]) == 0
    output = statement_file.with_name("statement_08.xml")
    assert output.exists()
    assert str(output) in capsys.readouterr().out


def test_main_with_output_and_config(statement_file, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("indent: 0\n")
    output = tmp_path / "converted.xml"

    assert cli.main([str(statement_file), "-o", str(output), "-c", str(config)]) == 0
    assert output.read_bytes().count(b"\n") == 1


def test_main_continues_after_failure(statement_file, tmp_path):
    broken = tmp_path / "broken.xml"
    broken.write_bytes(b"<Document>")
    missing = tmp_path / "missing.xml"

    assert cli.main([str(broken), str(missing), str(statement_file)]) == 1
    assert not (tmp_path / "broken_08.xml").exists()
    assert not (tmp_path / "missing_08.xml").exists()
    assert (tmp_path / "statement_08.xml").exists()


def test_main_rejects_output_with_many_inputs(statement_file, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            [str(statement_file), str(statement_file), "-o", str(tmp_path / "x.xml")]
        )
    assert excinfo.value.code == 2


def test_main_rejects_bad_config(statement_file, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("indent: wide\n")
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(statement_file), "-c", str(config)])
    assert excinfo.value.code == 2


@pytest.mark.parametrize(
    "verbose, expected",
    [
        (True, [("logging", logging.DEBUG), ("config", "INFO")]),
        (False, [("config", "INFO"), ("logging", "INFO")]),
    ],
)
def test_main_logging_setup_order(
    statement_file, tmp_path, monkeypatch, verbose, expected
):
    config = tmp_path / "config.yaml"
    config.write_text("log_level: info\n")
    events = []
    load = ConverterConfig.from_yaml

    def from_yaml(fname):
        loaded = load(fname)
        events.append(("config", loaded.log_level.upper()))
        return loaded

    monkeypatch.setattr(ConverterConfig, "from_yaml", staticmethod(from_yaml))
    monkeypatch.setattr(
        cli, "configure_logging", lambda level: events.append(("logging", level))
    )

    argv = [str(statement_file), "-c", str(config)] + (["-v"] if verbose else [])
    assert cli.main(argv) == 0
    assert events == expected
