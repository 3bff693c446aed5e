"""Assembly of application bundle directories."""

from __future__ import annotations

import os
import plistlib
import shutil
from pathlib import Path
from typing import Union

from .info_plist import InfoPlist

__all__ = ["AppBundle", "app_bundle_identifier"]

PathArg = Union[str, os.PathLike]


class AppBundle:
    """An ``<name>.app`` directory laid out for iOS or macOS."""

    def __init__(self, build_dir: PathArg, info: InfoPlist) -> None:
        if info.cf_bundle_name is None:
            raise ValueError("missing info.name")
        self.info = info
        self._appdir = Path(build_dir) / f"{info.cf_bundle_name}.app"
        shutil.rmtree(self._appdir, ignore_errors=True)
        self._appdir.mkdir(parents=True, exist_ok=True)

    @property
    def appdir(self) -> Path:
        return self._appdir

    @property
    def _ios(self) -> bool:
        return self.info.ls_requires_ios is True

    @property
    def _content_dir(self) -> Path:
        return self._appdir if self._ios else self._appdir / "Contents"

    @property
    def _resource_dir(self) -> Path:
        return self._content_dir if self._ios else self._content_dir / "Resources"

    @property
    def _framework_dir(self) -> Path:
        return self._content_dir / "Frameworks"

    @property
    def _executable_dir(self) -> Path:
        return self._content_dir if self._ios else self._content_dir / "MacOS"

    def add_file(self, path: PathArg, dest: PathArg) -> None:
        """Copy a file to ``dest`` inside the resource directory."""
        target = self._resource_dir / dest
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(path, target)

    def add_directory(self, source: PathArg, dest: PathArg) -> None:
        """Copy a directory tree to ``dest`` inside the resource directory."""
        target = self._resource_dir / dest
        target.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, target, dirs_exist_ok=True)

    def add_executable(self, path: PathArg) -> None:
        """Copy an executable in; the first one becomes the bundle executable."""
        source = Path(path)
        exe_dir = self._executable_dir
        exe_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy(source, exe_dir / source.name)
        if self.info.cf_bundle_executable is None:
            self.info.cf_bundle_executable = source.name

    def add_framework(self, path: PathArg) -> None:
        """Copy a framework directory into the frameworks directory."""
        source = Path(path)
        target = self._framework_dir / source.name
        target.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, target, dirs_exist_ok=True)

    def add_lib(self, path: PathArg) -> None:
        """Copy a shared library into the frameworks directory."""
        source = Path(path)
        self._framework_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy(source, self._framework_dir / source.name)

    def finish(self) -> Path:
        """Write ``Info.plist`` and return its path."""
        path = self._content_dir / "Info.plist"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.info.dumps())
        return path


def app_bundle_identifier(bundle: PathArg) -> str:
    """Read ``CFBundleIdentifier`` from a bundle's ``Info.plist``."""
    root = Path(bundle)
    contents = root / "Contents"
    plist_path = contents / "Info.plist" if contents.exists() else root / "Info.plist"
    info = plistlib.loads(plist_path.read_bytes(), fmt=plistlib.FMT_XML)
    if not isinstance(info, dict):
        raise ValueError("invalid Info.plist")
    identifier = info.get("CFBundleIdentifier")
    if not isinstance(identifier, str):
        raise ValueError("invalid Info.plist")
    return identifier