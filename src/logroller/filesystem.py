"""Filesystem access used by the rolling engine."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    def list_dir(self, path: Path) -> list[Path]: ...

    def is_dir(self, path: Path) -> bool: ...

    def exists(self, path: Path) -> bool: ...

    def modification_time(self, path: Path) -> float: ...

    def copy_file(self, src: Path, dst: Path, overwrite: bool = True) -> None: ...

    def delete_file(self, path: Path) -> None: ...


class LocalFileSystem:
    """FileSystem backed by pathlib and shutil."""

    def list_dir(self, path: Path) -> list[Path]:
        return list(path.iterdir())

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def exists(self, path: Path) -> bool:
        return path.exists()

    def modification_time(self, path: Path) -> float:
        return path.stat().st_mtime

    def copy_file(self, src: Path, dst: Path, overwrite: bool = True) -> None:
        """Copy file contents from src to dst.

        Raises FileExistsError when dst exists and overwrite is False.
        """
        if not overwrite and dst.exists():
            raise FileExistsError(f"Destination already exists: {dst}")
        shutil.copyfile(src, dst)

    def delete_file(self, path: Path) -> None:
        path.unlink()
