from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import orjson

from domain.ports.repositories import FdlImportError


def load_json_object(path: Path) -> dict[str, Any]:
    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        raise FdlImportError(path, f"malformed JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise FdlImportError(path, "top-level JSON value must be an object")
    return data


def dump_json_bytes(payload: Any, *, indent: bool = True) -> bytes:
    option = orjson.OPT_INDENT_2 if indent else 0
    try:
        return orjson.dumps(payload, option=option)
    except TypeError:
        return json.dumps(payload, ensure_ascii=True, indent=2 if indent else None).encode("utf-8")


def write_json_atomic(path: Path, payload: Any, *, indent: bool = True) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload, indent=indent))
    tmp_path.replace(path)
