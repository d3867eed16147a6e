"""Tests for the SmartFile descriptor."""

import base64
from pathlib import Path

import pytest
from pydantic import ValidationError

from datadrop import SmartFile


def _smart_file(path: Path, **overrides) -> SmartFile:
    values = {
        "path": path,
        "fingerprint": "abc123",
        "media_type": "text/plain",
        "byte_count": path.stat().st_size if path.exists() else 0,
    }
    values.update(overrides)
    return SmartFile(**values)


def test_smart_file_properties(tmp_path: Path) -> None:
    path = tmp_path / "__datadrop_x1y2.txt"
    path.write_text("hi", encoding="utf-8")

    anonymous = _smart_file(path)
    named = _smart_file(path, client_name="greeting.txt")

    assert anonymous.extension == "txt"
    assert anonymous.name == "__datadrop_x1y2.txt"
    assert named.name == "greeting.txt"
    assert anonymous.read_bytes() == b"hi"
    assert anonymous.to_data_uri() == "data:text/plain;base64," + base64.b64encode(b"hi").decode()


def test_smart_file_is_immutable(tmp_path: Path) -> None:
    descriptor = _smart_file(tmp_path / "a.bin")

    with pytest.raises(ValidationError):
        descriptor.media_type = "image/png"  # type: ignore[misc]


def test_smart_file_rejects_negative_sizes(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        _smart_file(tmp_path / "a.bin", byte_count=-1)


def test_delete_returns_detached_copy(tmp_path: Path) -> None:
    path = tmp_path / "a.bin"
    path.write_bytes(b"\x00")
    descriptor = _smart_file(path)

    deleted = descriptor.delete()

    assert not path.exists()
    assert deleted.exists is False
    assert descriptor.exists is True
    assert deleted.delete().exists is False


def test_context_manager_honors_self_destruct(tmp_path: Path) -> None:
    doomed = tmp_path / "doomed.bin"
    kept = tmp_path / "kept.bin"
    doomed.write_bytes(b"1")
    kept.write_bytes(b"2")

    with _smart_file(doomed, self_destruct=True):
        assert doomed.exists()
    with _smart_file(kept, self_destruct=False):
        pass

    assert not doomed.exists()
    assert kept.exists()
