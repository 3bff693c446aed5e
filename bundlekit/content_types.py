"""The ``[Content_Types].xml`` part of an MSIX package."""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Optional, Union

from .appx_manifest import _element

__all__ = [
    "CONTENT_TYPES_NAMESPACE",
    "DefaultRule",
    "OverrideRule",
    "ContentTypes",
    "ContentTypesBuilder",
]

CONTENT_TYPES_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/content-types"
_OCTET_STREAM = "application/octet-stream"
_MIME_TYPES = mimetypes.MimeTypes()


@dataclass(frozen=True)
class DefaultRule:
    """Content type of every part with a given extension."""

    ext: str
    mime: str

    def _to_xml(self) -> str:
        return _element("Default", [("Extension", self.ext), ("ContentType", self.mime)])


@dataclass(frozen=True)
class OverrideRule:
    """Content type of one named part."""

    part_name: str
    mime: str

    def _to_xml(self) -> str:
        return _element(
            "Override", [("PartName", self.part_name), ("ContentType", self.mime)]
        )


def _default_rules() -> list[Union[DefaultRule, OverrideRule]]:
    return [
        OverrideRule("/AppxBlockMap.xml", "application/vnd.ms-appx.blockmap+xml"),
        OverrideRule("/AppxSignature.p7x", "application/vnd.ms-appx.signature"),
    ]


@dataclass
class ContentTypes:
    """The root ``Types`` element."""

    rules: list[Union[DefaultRule, OverrideRule]] = field(default_factory=_default_rules)
    xmlns: str = CONTENT_TYPES_NAMESPACE

    def to_xml(self) -> str:
        """Serialize as a ``Types`` element."""
        return _element(
            "Types", [("xmlns", self.xmlns)], [rule._to_xml() for rule in self.rules]
        )


def _extension(path: Union[str, os.PathLike]) -> Optional[str]:
    name = PurePosixPath(os.fspath(path)).name
    if name in ("", ".", ".."):
        return None
    dot = name.rfind(".")
    if dot <= 0:
        return None
    return name[dot + 1 :]


def _guess_mime(ext: str) -> str:
    for table in (_MIME_TYPES.types_map[True], _MIME_TYPES.types_map[False]):
        for key in ("." + ext, "." + ext.lower()):
            if key in table:
                return table[key]
    return _OCTET_STREAM


class ContentTypesBuilder:
    """Adds a default rule for each new file extension seen."""

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._inner: Optional[ContentTypes] = ContentTypes()

    def add(self, path: Union[str, os.PathLike]) -> None:
        """Record the extension of ``path``, if it has one not seen before."""
        if self._inner is None:
            raise RuntimeError("content types already finished")
        ext = _extension(path)
        if ext is None or ext in self._seen:
            return
        self._inner.rules.append(DefaultRule(ext, _guess_mime(ext)))
        self._seen.add(ext)

    def finish(self) -> ContentTypes:
        """Return the collected content types; the builder cannot be reused."""
        if self._inner is None:
            raise RuntimeError("content types already finished")
        inner, self._inner = self._inner, None
        return inner