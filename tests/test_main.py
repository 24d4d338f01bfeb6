"""
Driver tests
============
Run with:  python -m pytest tests/ -v
"""

import io

import pytest

from errors import EnigmaError
from main import Config, main, process
from utilities import DEFAULT_CONFIG, read_config

SETTINGS = "* B Beta III IV I AXLE (HQ) (EX) (IP) (TR) (BY)\n"


def run_process(text, cfg=None):
    sink = io.StringIO()
    process(read_config(DEFAULT_CONFIG), io.StringIO(text), sink, cfg or Config())
    return sink.getvalue()


# ── process() ─────────────────────────────────────────────────────────────────
def test_process_groups_output():
    out = run_process(SETTINGS + "FROM HIS SHOULDER HIAWATHA\n")
    assert out == "QVPQS OKOIL PUBKJ ZPISF XDW\n"


def test_process_echoes_blank_lines():
    out = run_process(SETTINGS + "\nFROM\n\n")
    assert out == "\nQVPQ\n\n"


def test_settings_lines_reset_the_machine():
    out = run_process(SETTINGS + "FROM\n" + SETTINGS + "FROM\n")
    assert out == "QVPQ\nQVPQ\n"


def test_decrypts_its_own_output():
    cipher = run_process(SETTINGS + "FROM HIS SHOULDER HIAWATHA\n")
    plain = run_process(SETTINGS + cipher)
    assert plain == "FROMH ISSHO ULDER HIAWA THA\n"


def test_normalize_option():
    out = run_process(SETTINGS + "From his shoulder, Hiawatha\n", Config(normalize=True))
    assert out == "QVPQS OKOIL PUBKJ ZPISF XDW\n"


def test_block_option():
    out = run_process(SETTINGS + "FROM\n", Config(block=2))
    assert out == "QV PQ\n"


def test_lowercase_without_normalize_fails():
    with pytest.raises(EnigmaError):
        run_process(SETTINGS + "From\n")


def test_input_must_start_with_settings():
    with pytest.raises(EnigmaError):
        run_process("FROM\n" + SETTINGS)


def test_empty_input_fails():
    with pytest.raises(EnigmaError):
        run_process("")


# ── main() ────────────────────────────────────────────────────────────────────
def test_main_with_files(tmp_path):
    src = tmp_path / "msg.in"
    dst = tmp_path / "msg.out"
    src.write_text(SETTINGS + "FROM HIS SHOULDER HIAWATHA\n", encoding="utf-8")

    assert main([str(_write_conf(tmp_path)), str(src), str(dst)]) == 0
    assert dst.read_text(encoding="utf-8") == "QVPQS OKOIL PUBKJ ZPISF XDW\n"


def test_main_reports_errors(tmp_path, capsys):
    src = tmp_path / "msg.in"
    src.write_text("* B Beta III IV I AXL\nFROM\n", encoding="utf-8")

    assert main([str(_write_conf(tmp_path)), str(src)]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_main_missing_config(tmp_path, capsys):
    assert main([str(tmp_path / "nope.conf")]) == 1
    assert "could not open" in capsys.readouterr().err


def _write_conf(tmp_path):
    conf = tmp_path / "default.conf"
    conf.write_text(DEFAULT_CONFIG, encoding="utf-8")
    return conf


def test_main_rejects_non_utf8_input(tmp_path, capsys):
    src = tmp_path / "msg.in"
    src.write_bytes(SETTINGS.encode() + b"FROM \xff\xfe\n")

    assert main([str(_write_conf(tmp_path)), str(src)]) == 1
    assert "not UTF-8" in capsys.readouterr().err
