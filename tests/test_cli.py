"""Tests for the geotranspile command: files, stdin/stdout, exit codes."""

import io
import json

import pytest

from geotranspile.cli import main

BOARD = """\
POLYGON ((100 50, 101 51, 102 52)) | .nomenclature
POINT (200 201) | .smd | .bga | symbol=r100.0
POLYGON ((300 80, 301 81, 302 82, 303 83)) | .sliver_fill
"""


@pytest.fixture
def board_file(tmp_path):
    path = tmp_path / "board.wkt"
    path.write_text(BOARD, encoding="utf-8")
    return path


class TestCLI:

    def test_file_to_file(self, tmp_path, board_file):
        out = tmp_path / "board.geojson"
        log = tmp_path / "run.log"
        assert main(["-i", str(board_file), "-o", str(out), "-l", str(log)]) == 0

        data = json.loads(out.read_text(encoding="utf-8"))
        assert [f["geometry"]["type"] for f in data["features"]] == ["Polygon", "Point", "Polygon"]
        assert data["features"][1]["properties"] == {
            ".smd": "true", ".bga": "true", "symbol": "r100.0",
        }
        assert "Wrote 3 features" in log.read_text(encoding="utf-8")

    def test_log_file_is_appended(self, tmp_path, board_file):
        log = tmp_path / "run.log"
        log.write_text("previous run\n", encoding="utf-8")
        out = tmp_path / "out.geojson"
        assert main(["-i", str(board_file), "-o", str(out), "-l", str(log)]) == 0
        assert log.read_text(encoding="utf-8").startswith("previous run\n")

    def test_stdin_to_stdout(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("POINT (1 2) | name=pad\n"))
        assert main([]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["features"][0]["geometry"]["coordinates"] == [1.0, 2.0]
        assert data["features"][0]["properties"] == {"name": "pad"}

    def test_precision_flag(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("POINT (1 2)\n"))
        assert main(["--precision", "1"]) == 0
        assert "1.0, 2.0]" in capsys.readouterr().out

    def test_missing_input_fails(self, tmp_path):
        out = tmp_path / "out.geojson"
        assert main(["-i", str(tmp_path / "missing.wkt"), "-o", str(out)]) == 1
        assert not out.exists()

    def test_parse_error_fails_and_is_logged(self, tmp_path):
        bad = tmp_path / "bad.wkt"
        bad.write_text("POINT (0 0)\nHEXAGON (1 1)\n", encoding="utf-8")
        log = tmp_path / "run.log"
        assert main(["-i", str(bad), "-o", str(tmp_path / "out.geojson"), "-l", str(log)]) == 1
        text = log.read_text(encoding="utf-8")
        assert "Transpilation failed" in text
        assert "line 2" in text

    def test_unwritable_output_fails(self, tmp_path, board_file):
        out = tmp_path / "no-such-dir" / "out.geojson"
        assert main(["-i", str(board_file), "-o", str(out)]) == 1

    def test_unopenable_log_fails(self, tmp_path, board_file, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        log = blocker / "run.log"
        assert main(["-i", str(board_file), "-o", str(tmp_path / "o.geojson"), "-l", str(log)]) == 1
        assert "Cannot open log file" in capsys.readouterr().err

    def test_invalid_utf8_input_fails_and_is_logged(self, tmp_path):
        bad = tmp_path / "binary.wkt"
        bad.write_bytes(b"POINT (1 2) | name=\xff\xfe\n")
        log = tmp_path / "run.log"
        out = tmp_path / "out.geojson"
        assert main(["-i", str(bad), "-o", str(out), "-l", str(log)]) == 1
        assert "Transpilation failed" in log.read_text(encoding="utf-8")
        assert "not valid text" in log.read_text(encoding="utf-8")
        assert not out.exists()

    def test_invalid_utf8_on_stdin_fails(self, monkeypatch):
        stdin = io.TextIOWrapper(io.BytesIO(b"\xff\n"), encoding="utf-8")
        monkeypatch.setattr("sys.stdin", stdin)
        assert main([]) == 1

    @pytest.mark.parametrize("value", ["-1", "18", "six"])
    def test_out_of_range_precision_rejected_before_output(self, tmp_path, board_file, capsys, value):
        out = tmp_path / "out.geojson"
        with pytest.raises(SystemExit) as exc_info:
            main(["-i", str(board_file), "-o", str(out), "--precision", value])
        assert exc_info.value.code != 0
        assert "--precision" in capsys.readouterr().err
        assert not out.exists()

    def test_precision_bounds_accepted(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("POINT (1 2)\n"))
        assert main(["--precision", "0"]) == 0
        assert "[\n1, 2]" in capsys.readouterr().out
