import io
import json

import pytest

from station_uptime import main as cli


def test_text_output(sample_file, capsys):
    cli.main([str(sample_file)])
    out = capsys.readouterr().out
    assert out == "0 100\n1 0\n2 100\n"


def test_reads_stdin(monkeypatch, capsys, sample_document):
    monkeypatch.setattr("sys.stdin", io.StringIO(sample_document))
    cli.main([])
    assert capsys.readouterr().out.splitlines()[0] == "0 100"


def test_json_output_to_file(sample_file, tmp_path):
    target = tmp_path / "out" / "uptime.json"
    cli.main([str(sample_file), "--format", "json", "--output", str(target)])
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert [entry["station_id"] for entry in payload] == [0, 1, 2]


def test_html_output(sample_file, capsys):
    cli.main([str(sample_file), "--format", "html"])
    assert "<table" in capsys.readouterr().out


def test_omit_unreported(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text(
        "[Stations]\n1 10\n2 20\n[Charger Availability Reports]\n10 0 100 true\n",
        encoding="utf-8",
    )
    cli.main([str(path), "--omit-unreported"])
    assert capsys.readouterr().out == "1 100\n"


def test_invalid_input_exits_with_error(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("[Stations]\n1 100\n[Charger Availability Reports]\n100 10 5 true\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(path)])
    assert excinfo.value.code == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("ERROR: line 4:")


def test_missing_file_exits_with_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "nope.txt")])
    assert excinfo.value.code == 2
    assert "ERROR:" in capsys.readouterr().err


def test_lenient_status_flag(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text(
        "[Stations]\n1 10\n[Charger Availability Reports]\n10 0 50 True\n10 50 100\n",
        encoding="utf-8",
    )
    cli.main([str(path), "--lenient-status"])
    assert capsys.readouterr().out == "1 50\n"


def test_undecodable_stdin_exits_with_error(monkeypatch, capsys):
    monkeypatch.setattr(
        "sys.stdin", io.TextIOWrapper(io.BytesIO(b"[Stations]\n1 \xff\n"), encoding="utf-8")
    )
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2
    assert capsys.readouterr().err.startswith("ERROR: Unable to read <stdin>")
