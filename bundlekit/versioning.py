"""Android target ABIs and version codes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

__all__ = ["Target", "VersionCode"]

_SEMVER_SEPARATORS = re.compile(r"[.\-+]")


class Target(Enum):
    """Native architectures an APK can carry libraries for."""

    ARMV7A = 1
    ARM64_V8A = 2
    X86 = 3
    X86_64 = 4

    def android_abi(self) -> str:
        """Identifier the NDK uses for this ABI."""
        return _ABI_NAMES[self]


_ABI_NAMES = {
    Target.ARM64_V8A: "arm64-v8a",
    Target.ARMV7A: "armeabi-v7a",
    Target.X86: "x86",
    Target.X86_64: "x86_64",
}


def _check_byte(value: int, what: str) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{what} out of range: {value}")
    return value


@dataclass(frozen=True)
class VersionCode:
    """A major.minor.patch version, each part fitting in one byte."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        _check_byte(self.major, "major version")
        _check_byte(self.minor, "minor version")
        _check_byte(self.patch, "patch version")

    @classmethod
    def from_semver(cls, version: str) -> "VersionCode":
        """Take the first three numeric parts of a semantic version string."""
        parts = _SEMVER_SEPARATORS.split(version)
        if len(parts) < 3:
            raise ValueError("invalid semver")
        numbers = []
        for part in parts[:3]:
            if not (part.isascii() and part.isdigit()):
                raise ValueError("invalid semver")
            number = int(part)
            if number > 0xFF:
                raise ValueError("invalid semver")
            numbers.append(number)
        return cls(*numbers)

    def to_code(self, apk_id: int) -> int:
        """Pack the version and an APK id into a 32-bit version code."""
        _check_byte(apk_id, "apk id")
        return apk_id << 24 | self.major << 16 | self.minor << 8 | self.patch