from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml
from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json_object
from domain.cameras import CameraManufacturer
from domain.ports.repositories import CameraCatalogSource, FdlImportError


class FileSystemCameraCatalogSource(CameraCatalogSource):
    """Read-only camera reference table.

    Accepts YAML (``.yaml``/``.yml``) or JSON with a top-level
    ``manufacturers`` list.
    """

    def load_all(self, path: Path) -> List[CameraManufacturer]:
        payload = self._load_payload(path)
        entries = payload.get("manufacturers", [])
        if not isinstance(entries, list):
            raise FdlImportError(path, "'manufacturers' must be a list")
        try:
            return [CameraManufacturer.model_validate(entry) for entry in entries]
        except ValidationError as exc:
            raise FdlImportError(path, f"invalid camera table ({exc.error_count()} error(s))") from exc

    def _load_payload(self, path: Path) -> dict[str, Any]:
        if path.suffix.lower() not in {".yaml", ".yml"}:
            return load_json_object(path)
        try:
            content = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise FdlImportError(path, f"malformed YAML ({exc})") from exc
        if not isinstance(content, dict):
            raise FdlImportError(path, "top-level YAML value must be a mapping")
        return content
