import os
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from bundlekit.appimage import AppImage


def _fake_mksquashfs(returncode=0):
    def run(args, **kwargs):
        if returncode == 0:
            Path(args[2]).write_bytes(b"SQSH")
        return subprocess.CompletedProcess(args, returncode)

    return run


def test_appdir_created(tmp_path):
    image = AppImage(tmp_path, "demo")
    assert image.appdir == tmp_path / "demo.AppDir"
    assert image.appdir.is_dir()


def test_add_desktop(tmp_path):
    image = AppImage(tmp_path, "demo")
    image.add_desktop()
    text = (image.appdir / "demo.desktop").read_text()
    assert text.splitlines() == [
        "[Desktop Entry]",
        "Version=1.0",
        "Type=Application",
        "Terminal=false",
        "Name=demo",
        "Exec=demo %u",
        "Icon=demo",
        "Categories=Utility;",
    ]


def test_add_apprun_links_to_executable(tmp_path):
    image = AppImage(tmp_path, "demo")
    image.add_apprun()
    assert os.readlink(image.appdir / "AppRun") == "demo"


def test_add_icon(tmp_path):
    icon = tmp_path / "logo.png"
    icon.write_bytes(b"png")
    image = AppImage(tmp_path / "build", "demo")
    image.add_icon(icon)
    assert (image.appdir / "demo.png").read_bytes() == b"png"
    assert os.readlink(image.appdir / ".DirIcon") == "demo.png"


def test_add_icon_without_extension(tmp_path):
    icon = tmp_path / "logo"
    icon.write_bytes(b"png")
    image = AppImage(tmp_path / "build", "demo")
    with pytest.raises(ValueError, match="unsupported extension"):
        image.add_icon(icon)


def test_add_file_and_directory(tmp_path):
    src = tmp_path / "f.txt"
    src.write_text("x")
    tree = tmp_path / "tree"
    (tree / "d").mkdir(parents=True)
    (tree / "d" / "g.txt").write_text("y")
    image = AppImage(tmp_path / "build", "demo")
    image.add_file(src, "usr/share/f.txt")
    image.add_directory(tree, "usr/lib")
    assert (image.appdir / "usr" / "share" / "f.txt").read_text() == "x"
    assert (image.appdir / "usr" / "lib" / "d" / "g.txt").read_text() == "y"


def test_build_prepends_runtime(tmp_path):
    image = AppImage(tmp_path / "build", "demo")
    out = tmp_path / "demo.AppImage"
    with mock.patch("subprocess.run", side_effect=_fake_mksquashfs()) as run:
        result = image.build(out, b"RUNTIME")
    args = run.call_args.args[0]
    assert args[0] == "mksquashfs"
    assert args[3:] == ["-root-owned", "-noappend", "-quiet"]
    assert result == out
    assert out.read_bytes() == b"RUNTIMESQSH"
    assert out.stat().st_mode & 0o777 == 0o755


def test_build_failure_raises(tmp_path):
    image = AppImage(tmp_path / "build", "demo")
    with mock.patch("subprocess.run", side_effect=_fake_mksquashfs(1)):
        with pytest.raises(RuntimeError, match="mksquashfs failed"):
            image.build(tmp_path / "demo.AppImage", b"RUNTIME")