from __future__ import annotations

from pathlib import Path

import pytest

from sheetcrm.blobs import FileBlobStore, MemoryBlobStore


def test_memory_blob_store() -> None:
    blobs = MemoryBlobStore({"a": "1"})

    blobs.set("b", "2")
    blobs.delete("a")
    blobs.delete("missing")

    assert blobs.get("a") is None
    assert blobs.get("b") == "2"
    assert blobs.keys() == ["b"]


def test_file_blob_store_round_trip(tmp_path: Path) -> None:
    root = tmp_path / "state"
    blobs = FileBlobStore(root)

    assert blobs.get("sheetcrm_data") is None

    blobs.set("sheetcrm_data", '[{"id": "1"}]')
    assert blobs.get("sheetcrm_data") == '[{"id": "1"}]'
    assert (root / "sheetcrm_data.json").is_file()
    assert not list(root.glob("*.tmp"))

    blobs.set("sheetcrm_data", "[]")
    assert FileBlobStore(root).get("sheetcrm_data") == "[]"

    blobs.delete("sheetcrm_data")
    blobs.delete("sheetcrm_data")
    assert blobs.get("sheetcrm_data") is None


@pytest.mark.parametrize("key", ["", "../escape", "a/b", "name with space"])
def test_file_blob_store_rejects_unsafe_keys(tmp_path: Path, key: str) -> None:
    with pytest.raises(ValueError):
        FileBlobStore(tmp_path).get(key)
