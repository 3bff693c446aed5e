"""The MSIX block map: SHA-256 hashes of every 64 KiB block of every file."""

from __future__ import annotations

import base64
import hashlib
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import BinaryIO, Optional

from .appx_manifest import _element

__all__ = [
    "BLOCK_SIZE",
    "BLOCKMAP_NAMESPACE",
    "HASH_METHOD",
    "Block",
    "BlockFile",
    "AppxBlockMap",
    "BlockMapBuilder",
]

BLOCK_SIZE = 65_536
BLOCKMAP_NAMESPACE = "http://schemas.microsoft.com/appx/2010/blockmap"
HASH_METHOD = "http://www.w3.org/2001/04/xmlenc#sha256"
_LFH_FIXED_SIZE = 30


@dataclass
class Block:
    """One block of a file: the hash of its uncompressed data and stored size."""

    hash: str
    size: Optional[int] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "Block":
        """A block holding the base64 SHA-256 hash of ``data``."""
        return cls(base64.b64encode(hashlib.sha256(data).digest()).decode("ascii"))

    def _to_xml(self) -> str:
        size = None if self.size is None else str(self.size)
        return _element("Block", [("Hash", self.hash), ("Size", size)])


@dataclass
class BlockFile:
    """A file in the package and its blocks."""

    name: str = ""
    size: int = 0
    lfh_size: int = 0
    blocks: list[Block] = field(default_factory=list)

    def _to_xml(self) -> str:
        return _element(
            "File",
            [
                ("Name", self.name),
                ("Size", str(self.size)),
                ("LfhSize", str(self.lfh_size)),
            ],
            [block._to_xml() for block in self.blocks],
        )


@dataclass
class AppxBlockMap:
    """The root ``BlockMap`` element."""

    files: list[BlockFile] = field(default_factory=list)
    ns: str = BLOCKMAP_NAMESPACE
    hash_method: str = HASH_METHOD

    def to_xml(self) -> str:
        """Serialize as a ``BlockMap`` element."""
        return _element(
            "BlockMap",
            [("xmlns", self.ns), ("HashMethod", self.hash_method)],
            [f._to_xml() for f in self.files],
        )


def _read_block(stream: BinaryIO, size: int) -> bytes:
    parts = []
    remaining = size
    while remaining:
        data = stream.read(remaining)
        if not data:
            break
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


class BlockMapBuilder:
    """Hashes archive members block by block into a block map."""

    def __init__(self) -> None:
        self._block_map = AppxBlockMap()

    def add(self, name: str, stream: BinaryIO) -> BlockFile:
        """Hash the uncompressed contents of archive member ``name``."""
        archive_name = "\\".join(PurePosixPath(name).parts)
        lfh_size = _LFH_FIXED_SIZE + len(archive_name.encode("utf-8"))
        if lfh_size > 0xFFFF:
            raise ValueError(f"file name too long: {name!r}")
        entry = BlockFile(name=archive_name, size=0, lfh_size=lfh_size)
        while True:
            data = _read_block(stream, BLOCK_SIZE)
            entry.size += len(data)
            entry.blocks.append(Block.from_bytes(data))
            if len(data) != BLOCK_SIZE:
                break
        self._block_map.files.append(entry)
        return entry

    def finish(self) -> AppxBlockMap:
        """Return the block map of every file added."""
        return self._block_map