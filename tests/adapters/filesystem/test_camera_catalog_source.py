from __future__ import annotations

import json
from pathlib import Path

import pytest

from adapters.filesystem.camera_catalog_source import FileSystemCameraCatalogSource
from domain.ports.repositories import FdlImportError
from tests.helpers.fdl_fixtures import camera_table_path


def test_load_yaml_reference_table() -> None:
    manufacturers = FileSystemCameraCatalogSource().load_all(camera_table_path())

    assert [item.name for item in manufacturers] == ["ARRI", "RED"]
    alexa = manufacturers[0].model("ALEXA 35")
    assert alexa is not None
    open_gate = alexa.resolution("4.6K 3:2 Open Gate")
    assert open_gate is not None
    assert (open_gate.width, open_gate.height) == (4608, 3164)
    assert open_gate.physical_width_mm == pytest.approx(27.99)


def test_load_json_reference_table(tmp_path: Path) -> None:
    target = tmp_path / "cameras.json"
    target.write_text(
        json.dumps(
            {
                "manufacturers": [
                    {"name": "Sony", "models": [{"name": "VENICE 2", "resolutions": [
                        {"name": "8.6K 3:2", "width": 8640, "height": 5760}
                    ]}]}
                ]
            }
        ),
        encoding="utf-8",
    )

    manufacturers = FileSystemCameraCatalogSource().load_all(target)

    assert manufacturers[0].models[0].resolutions[0].width == 8640


def test_missing_manufacturers_key_gives_empty_table(tmp_path: Path) -> None:
    target = tmp_path / "empty.yaml"
    target.write_text("other: 1\n", encoding="utf-8")

    assert FileSystemCameraCatalogSource().load_all(target) == []


@pytest.mark.parametrize(
    ("content", "match"),
    [
        ("manufacturers: {name: ARRI}\n", "must be a list"),
        ("manufacturers:\n  - name: ARRI\n    models:\n      - name: X\n        resolutions:\n          - {name: r, width: -1, height: 2}\n", "invalid camera table"),
        ("- just\n- a list\n", "must be a mapping"),
        ("manufacturers: [\n", "malformed YAML"),
    ],
)
def test_invalid_tables_raise_import_error(tmp_path: Path, content: str, match: str) -> None:
    target = tmp_path / "cameras.yaml"
    target.write_text(content, encoding="utf-8")

    with pytest.raises(FdlImportError, match=match):
        FileSystemCameraCatalogSource().load_all(target)
