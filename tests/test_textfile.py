from __future__ import annotations

import os
from pathlib import Path

import pytest

from devicectl.core.errors import StorageError
from devicectl.core.service import DeviceManager
from devicectl.storage.textfile import TextFileLineSink, TextFileLineSource


def test_source_keeps_blank_lines_so_indexes_match_the_file(tmp_path: Path) -> None:
    path = tmp_path / "input.txt"
    path.write_text("SW-1,Watch,true,27%\n\nP-1,Box,false,Linux\nbroken\n", encoding="utf-8")

    source = TextFileLineSource(path)
    assert source.read_lines() == ["SW-1,Watch,true,27%", "", "P-1,Box,false,Linux", "broken"]

    manager = DeviceManager(source)
    assert [d.id for d in manager.devices()] == ["SW-1", "P-1"]
    assert [f.line_index for f in manager.load_failures] == [1, 3]
    assert manager.load_failures[1].raw_line == "broken"


def test_missing_source_file_raises_storage_error(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        TextFileLineSource(tmp_path / "missing.txt").read_lines()


def test_sink_writes_one_line_per_record(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "devices.txt"

    TextFileLineSink(path).write_lines(["P-1,Box,false,Linux", "SW-1,Watch,true,5%"])

    assert path.read_text(encoding="utf-8") == "P-1,Box,false,Linux\nSW-1,Watch,true,5%\n"
    assert [p.name for p in path.parent.iterdir()] == ["devices.txt"]


def test_failed_replace_keeps_previous_content(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "devices.txt"
    path.write_text("P-1,Box,false,Linux\n", encoding="utf-8")

    def broken_replace(src, dst) -> None:
        raise OSError("read-only file system")

    monkeypatch.setattr(os, "replace", broken_replace)

    with pytest.raises(StorageError):
        TextFileLineSink(path).write_lines(["SW-1,Watch,true,5%"])

    assert path.read_text(encoding="utf-8") == "P-1,Box,false,Linux\n"
    assert [p.name for p in tmp_path.iterdir()] == ["devices.txt"]


def test_manager_file_round_trip(tmp_path: Path) -> None:
    source = tmp_path / "input.txt"
    source.write_text(
        "SW-1,Apple Watch SE2,true,27%\n"
        "P-1,LinuxPC,false,Linux Mint\n"
        "P-2,ThinkPad T440,false\n"
        "ED-1,Pi3,true,192.168.1.44,MD Ltd.Wifi-1\n",
        encoding="utf-8",
    )
    target = tmp_path / "output.txt"

    manager = DeviceManager(TextFileLineSource(source))
    manager.save_all(TextFileLineSink(target))

    assert target.read_text(encoding="utf-8") == source.read_text(encoding="utf-8")
