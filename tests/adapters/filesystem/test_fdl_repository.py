from __future__ import annotations

import json
from pathlib import Path

import pytest

from adapters.filesystem.fdl_repository import FileSystemFdlRepository
from domain.ports.repositories import FdlImportError
from domain.services.document_editing import create_empty_document
from tests.helpers.fdl_fixtures import fixture_path, load_fdl_fixture


def test_save_writes_spec_minimal_json(tmp_path: Path) -> None:
    document = load_fdl_fixture("hd_capture.fdl")
    target = tmp_path / "out" / "capture.fdl"

    FileSystemFdlRepository().save(document, target)

    text = target.read_text(encoding="utf-8")
    assert "null" not in text
    assert json.loads(text) == document.to_fdl_dict()
    assert FileSystemFdlRepository().load_by_path(target) == document


def test_save_without_indent_writes_single_line(tmp_path: Path) -> None:
    target = tmp_path / "compact.fdl"

    FileSystemFdlRepository(indent=False).save(create_empty_document("cart"), target)

    assert "\n" not in target.read_text(encoding="utf-8")


def test_load_raw_keeps_documents_the_model_cannot_parse(tmp_path: Path) -> None:
    target = tmp_path / "loose.fdl"
    target.write_text(json.dumps({"uuid": "x", "framing_intents": [{"id": "a"}]}), encoding="utf-8")
    repo = FileSystemFdlRepository()

    assert repo.load_raw(target)["framing_intents"] == [{"id": "a"}]
    with pytest.raises(FdlImportError, match="not an FDL document"):
        repo.load_by_path(target)


def test_malformed_json_raises_import_error(tmp_path: Path) -> None:
    target = tmp_path / "broken.fdl"
    target.write_text('{"uuid": ', encoding="utf-8")

    with pytest.raises(FdlImportError, match="malformed JSON") as excinfo:
        FileSystemFdlRepository().load_raw(target)

    assert excinfo.value.path == target


def test_non_object_payload_raises_import_error(tmp_path: Path) -> None:
    target = tmp_path / "list.fdl"
    target.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(FdlImportError, match="must be an object"):
        FileSystemFdlRepository().load_raw(target)


def test_load_all_with_paths_is_sorted(tmp_path: Path) -> None:
    repo = FileSystemFdlRepository()
    source = load_fdl_fixture("hd_capture.fdl")
    repo.save(source, tmp_path / "b.fdl")
    repo.save(source, tmp_path / "a.json")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    pairs = repo.load_all_with_paths(tmp_path)

    assert [path.name for path, _ in pairs] == ["a.json", "b.fdl"]
    assert all(document == source for _, document in pairs)


def test_fixture_loads_through_repository() -> None:
    document = FileSystemFdlRepository().load_by_path(fixture_path("broken_ids.fdl"))

    assert document.version.minor == 1
