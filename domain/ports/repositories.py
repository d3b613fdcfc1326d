from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from domain.cameras import CameraManufacturer
from domain.models import FdlDocument


class FdlImportError(ValueError):
    """A file could not be turned into an FDL payload or document."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class FdlRepository(Protocol):
    def load_raw(self, path: Path) -> dict[str, Any]: ...

    def load_by_path(self, path: Path) -> FdlDocument: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, FdlDocument]]: ...

    def save(self, document: FdlDocument, path: Path) -> None: ...


class CameraCatalogSource(Protocol):
    def load_all(self, path: Path) -> Sequence[CameraManufacturer]: ...
