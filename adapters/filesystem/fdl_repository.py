from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any, List

from filelock import FileLock
from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json_object, write_json_atomic
from domain.models import FdlDocument
from domain.ports.repositories import FdlImportError, FdlRepository

FDL_SUFFIXES = (".fdl", ".json")


class FileSystemFdlRepository(FdlRepository):
    def __init__(self, *, indent: bool = True) -> None:
        self._indent = indent

    def load_raw(self, path: Path) -> dict[str, Any]:
        return load_json_object(path)

    def load_by_path(self, path: Path) -> FdlDocument:
        return self.parse(path, self.load_raw(path))

    def parse(self, path: Path, payload: dict[str, Any]) -> FdlDocument:
        try:
            return FdlDocument.model_validate(payload)
        except ValidationError as exc:
            raise FdlImportError(path, f"not an FDL document ({exc.error_count()} error(s))") from exc

    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, FdlDocument]]:
        return [(path, self.load_by_path(path)) for path in sorted(iter_fdl_paths(directory))]

    def save(self, document: FdlDocument, path: Path) -> None:
        lock_path = path.with_suffix(f"{path.suffix}.lock")
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(lock_path)):
            write_json_atomic(path, document.to_fdl_dict(), indent=self._indent)


def iter_fdl_paths(directory: Path) -> Iterable[Path]:
    for suffix in FDL_SUFFIXES:
        yield from directory.glob(f"*{suffix}")
