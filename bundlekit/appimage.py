"""Assembly of AppImage directories and images."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Union

__all__ = ["AppImage"]

PathArg = Union[str, os.PathLike]


class AppImage:
    """An ``<name>.AppDir`` directory that can be packed into an AppImage."""

    def __init__(self, build_dir: PathArg, name: str) -> None:
        self.name = name
        self._appdir = Path(build_dir) / f"{name}.AppDir"
        shutil.rmtree(self._appdir, ignore_errors=True)
        self._appdir.mkdir(parents=True, exist_ok=True)

    @property
    def appdir(self) -> Path:
        return self._appdir

    def add_apprun(self) -> None:
        """Link ``AppRun`` to the executable named after the image."""
        if os.name == "posix":
            os.symlink(self.name, self._appdir / "AppRun")

    def add_desktop(self) -> None:
        """Write the desktop entry of the application."""
        lines = [
            "[Desktop Entry]",
            "Version=1.0",
            "Type=Application",
            "Terminal=false",
            f"Name={self.name}",
            f"Exec={self.name} %u",
            f"Icon={self.name}",
            "Categories=Utility;",
        ]
        path = self._appdir / f"{self.name}.desktop"
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")

    def add_icon(self, path: PathArg) -> None:
        """Copy the icon in under the image name and link ``.DirIcon`` to it."""
        ext = Path(path).suffix[1:]
        if not ext:
            raise ValueError("unsupported extension")
        name = f"{self.name}.{ext}"
        self.add_file(path, name)
        if os.name == "posix":
            os.symlink(name, self._appdir / ".DirIcon")

    def add_file(self, path: PathArg, name: PathArg) -> None:
        """Copy a file to ``name`` inside the AppDir."""
        dest = self._appdir / name
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy(path, dest)

    def add_directory(self, source: PathArg, dest: PathArg) -> None:
        """Copy a directory tree to ``dest`` inside the AppDir."""
        target = self._appdir / dest
        target.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, target, dirs_exist_ok=True)

    def build(self, out: PathArg, runtime: bytes) -> Path:
        """Pack the AppDir with mksquashfs and prepend the ``runtime`` executable."""
        squashfs = self._appdir.parent / f"{self.name}.squashfs"
        result = subprocess.run(
            [
                "mksquashfs",
                str(self._appdir),
                str(squashfs),
                "-root-owned",
                "-noappend",
                "-quiet",
            ],
            check=False,
        )
        if result.returncode != 0:
            raise RuntimeError(f"mksquashfs failed with exit code {result.returncode}")
        out_path = Path(out)
        with open(squashfs, "rb") as src, open(out_path, "wb") as dst:
            dst.write(runtime)
            shutil.copyfileobj(src, dst)
        if os.name == "posix":
            out_path.chmod(0o755)
        return out_path