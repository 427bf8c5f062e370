import pytest

pytest.importorskip("tkinter")
pytest.importorskip("PIL.ImageTk")

from conftest import build_ztex  # noqa: E402
from ztex_viewer import TREE_COLUMNS, format_hex_dump, read_texture_entry  # noqa: E402
from ZTEX.ztex_formats import ZTEXFormat  # noqa: E402


def test_format_hex_dump():
    dump = format_hex_dump(b"ZTEX" + bytes(range(20)))
    lines = dump.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("0000: 5A 54 45 58 00 01")
    assert lines[0].endswith("ZTEX............")
    assert lines[1].startswith("0010: 0C 0D 0E 0F 10 11 12 13")


def test_format_hex_dump_truncates():
    lines = format_hex_dump(bytes(100), max_bytes=32).splitlines()
    assert len(lines) == 3
    assert lines[-1] == "..."


def test_read_texture_entry(tmp_path):
    good = tmp_path / "GOOD.TEX"
    good.write_bytes(build_ztex(ZTEXFormat.R5G6B5, 8, 8, bytes(128)))
    path, header, error = read_texture_entry(good)
    assert path == good
    assert header.info.format is ZTEXFormat.R5G6B5
    assert error is None


def test_read_texture_entry_with_bad_file(tmp_path):
    bad = tmp_path / "BAD.TEX"
    bad.write_bytes(b"XXXX")
    path, header, error = read_texture_entry(bad)
    assert header is None
    assert "signature" in error


def test_tree_columns_match_entry_values(tmp_path):
    path = tmp_path / "A.TEX"
    path.write_bytes(build_ztex(ZTEXFormat.R5G6B5, 4, 2, bytes(16)))
    _path, header, _error = read_texture_entry(path)
    assert [name for name, _title in TREE_COLUMNS] == ["Name", "Format", "Size", "Mipmaps"]
    assert header.info.format.name == "R5G6B5"
