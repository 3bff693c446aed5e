"""Fixed-layout binary structures of the Android compiled resource format.

Every structure is little-endian.  ``read`` classmethods take a binary stream
and ``write`` methods emit the exact wire layout to a binary stream.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import BinaryIO, ClassVar, Optional, Union

__all__ = [
    "ResourceFormatError",
    "ChunkType",
    "ResValueType",
    "ResAttributeType",
    "ResChunkHeader",
    "ResStringPoolHeader",
    "ResTableHeader",
    "ResXmlNodeHeader",
    "ResXmlNamespace",
    "ResXmlStartElement",
    "ResXmlAttribute",
    "ResXmlEndElement",
    "ResTableRef",
    "ResTablePackageHeader",
    "ResTableTypeSpecHeader",
    "ResTableTypeHeader",
    "ResTableConfig",
    "ScreenType",
    "ResValue",
    "ResTableMapEntry",
    "ResTableMap",
    "ComplexValue",
    "ResTableEntry",
    "ResSpan",
]

_PACKAGE_NAME_UNITS = 128
_CONFIG_FIXED_SIZE = 28


class ResourceFormatError(ValueError):
    """Raised when resource data is truncated or malformed."""


def _read_exact(r: BinaryIO, n: int) -> bytes:
    data = r.read(n)
    if data is None or len(data) != n:
        got = 0 if data is None else len(data)
        raise ResourceFormatError(
            f"unexpected end of data: wanted {n} bytes, got {got}"
        )
    return data


def _unpack(r: BinaryIO, fmt: str) -> tuple:
    return struct.unpack(fmt, _read_exact(r, struct.calcsize(fmt)))


def _pack(w: BinaryIO, fmt: str, *values: int) -> None:
    try:
        data = struct.pack(fmt, *values)
    except struct.error as exc:
        raise ValueError(f"value out of range for layout {fmt!r}: {exc}") from exc
    w.write(data)


class ChunkType(IntEnum):
    """Type identifiers of resource chunks."""

    NULL = 0x0000
    STRING_POOL = 0x0001
    TABLE = 0x0002
    XML = 0x0003
    XML_START_NAMESPACE = 0x0100
    XML_END_NAMESPACE = 0x0101
    XML_START_ELEMENT = 0x0102
    XML_END_ELEMENT = 0x0103
    XML_RESOURCE_MAP = 0x0180
    TABLE_PACKAGE = 0x0200
    TABLE_TYPE = 0x0201
    TABLE_TYPE_SPEC = 0x0202
    UNKNOWN = 0x0206


class ResValueType(IntEnum):
    """Data types of a typed resource value."""

    NULL = 0x00
    REFERENCE = 0x01
    ATTRIBUTE = 0x02
    STRING = 0x03
    FLOAT = 0x04
    DIMENSION = 0x05
    FRACTION = 0x06
    INT_DEC = 0x10
    INT_HEX = 0x11
    INT_BOOLEAN = 0x12
    INT_COLOR_ARGB8 = 0x1C
    INT_COLOR_RGB8 = 0x1D
    INT_COLOR_ARGB4 = 0x1E
    INT_COLOR_RGB4 = 0x1F


class ResAttributeType(IntEnum):
    """Formats an attribute definition accepts."""

    ANY = 0x0000FFFF
    REFERENCE = 1 << 0
    STRING = 1 << 1
    INTEGER = 1 << 2
    BOOLEAN = 1 << 3
    COLOR = 1 << 4
    FLOAT = 1 << 5
    DIMENSION = 1 << 6
    FRACTION = 1 << 7
    ENUM = 1 << 16
    FLAGS = 1 << 17


@dataclass
class ResChunkHeader:
    """Header common to every chunk: type, header size and total size."""

    ty: int = 0
    header_size: int = 0
    size: int = 0

    @classmethod
    def read(cls, r: BinaryIO) -> "ResChunkHeader":
        return cls(*_unpack(r, "<HHI"))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<HHI", self.ty, self.header_size, self.size)


@dataclass
class ResStringPoolHeader:
    """Header of a string pool chunk."""

    SORTED_FLAG: ClassVar[int] = 1 << 0
    UTF8_FLAG: ClassVar[int] = 1 << 8

    string_count: int = 0
    style_count: int = 0
    flags: int = 0
    strings_start: int = 0
    styles_start: int = 0

    @classmethod
    def read(cls, r: BinaryIO) -> "ResStringPoolHeader":
        return cls(*_unpack(r, "<5I"))

    def write(self, w: BinaryIO) -> None:
        _pack(
            w,
            "<5I",
            self.string_count,
            self.style_count,
            self.flags,
            self.strings_start,
            self.styles_start,
        )

    def is_utf8(self) -> bool:
        return bool(self.flags & self.UTF8_FLAG)


@dataclass
class ResTableHeader:
    """Header of a resource table chunk."""

    package_count: int

    @classmethod
    def read(cls, r: BinaryIO) -> "ResTableHeader":
        return cls(*_unpack(r, "<I"))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<I", self.package_count)


@dataclass
class ResXmlNodeHeader:
    """Line number and comment of an XML node.

    Reading discards the stored values and yields the defaults, so compiled
    documents never carry source positions.
    """

    line_number: int = 1
    comment: int = -1

    @classmethod
    def read(cls, r: BinaryIO) -> "ResXmlNodeHeader":
        _unpack(r, "<Ii")
        return cls()

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<Ii", self.line_number, self.comment)


@dataclass
class ResXmlNamespace:
    """Prefix and URI string indices of a namespace declaration."""

    prefix: int
    uri: int

    @classmethod
    def read(cls, r: BinaryIO) -> "ResXmlNamespace":
        return cls(*_unpack(r, "<ii"))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<ii", self.prefix, self.uri)


@dataclass
class ResXmlStartElement:
    """Body of an XML start element; attributes follow it."""

    namespace: int = -1
    name: int = -1
    attribute_start: int = 0x0014
    attribute_size: int = 0x0014
    attribute_count: int = 0
    id_index: int = 0
    class_index: int = 0
    style_index: int = 0

    @classmethod
    def read(cls, r: BinaryIO) -> "ResXmlStartElement":
        return cls(*_unpack(r, "<ii6H"))

    def write(self, w: BinaryIO) -> None:
        _pack(
            w,
            "<ii6H",
            self.namespace,
            self.name,
            self.attribute_start,
            self.attribute_size,
            self.attribute_count,
            self.id_index,
            self.class_index,
            self.style_index,
        )


@dataclass
class ResValue:
    """A typed value: size, reserved byte, data type and 32-bit data."""

    size: int
    res0: int
    data_type: int
    data: int

    @classmethod
    def read(cls, r: BinaryIO) -> "ResValue":
        return cls(*_unpack(r, "<HBBI"))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<HBBI", self.size, self.res0, self.data_type, self.data)


@dataclass
class ResXmlAttribute:
    """An attribute of an XML start element."""

    namespace: int
    name: int
    raw_value: int
    typed_value: ResValue

    @classmethod
    def read(cls, r: BinaryIO) -> "ResXmlAttribute":
        namespace, name, raw_value = _unpack(r, "<iii")
        return cls(namespace, name, raw_value, ResValue.read(r))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<iii", self.namespace, self.name, self.raw_value)
        self.typed_value.write(w)


@dataclass
class ResXmlEndElement:
    """Body of an XML end element."""

    namespace: int
    name: int

    @classmethod
    def read(cls, r: BinaryIO) -> "ResXmlEndElement":
        return cls(*_unpack(r, "<ii"))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<ii", self.namespace, self.name)


@dataclass(frozen=True)
class ResTableRef:
    """A resource identifier: package byte, type byte and 16-bit entry."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFFFFFF:
            raise ValueError(f"resource reference out of range: {self.value}")

    @classmethod
    def new(cls, package: int, ty: int, entry: int) -> "ResTableRef":
        if not 0 <= package <= 0xFF:
            raise ValueError(f"package id out of range: {package}")
        if not 0 <= ty <= 0xFF:
            raise ValueError(f"type id out of range: {ty}")
        if not 0 <= entry <= 0xFFFF:
            raise ValueError(f"entry id out of range: {entry}")
        return cls((package << 24) | (ty << 16) | entry)

    def package(self) -> int:
        return (self.value >> 24) & 0xFF

    def ty(self) -> int:
        return (self.value >> 16) & 0xFF

    def entry(self) -> int:
        return self.value & 0xFFFF

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class ResTablePackageHeader:
    """Header of a table package chunk."""

    id: int
    name: str
    type_strings: int
    last_public_type: int
    key_strings: int
    last_public_key: int
    type_id_offset: int

    @classmethod
    def read(cls, r: BinaryIO) -> "ResTablePackageHeader":
        (package_id,) = _unpack(r, "<I")
        units = _unpack(r, f"<{_PACKAGE_NAME_UNITS}H")
        try:
            end = units.index(0)
        except ValueError:
            raise ResourceFormatError("package name is not NUL-terminated") from None
        try:
            name = struct.pack(f"<{end}H", *units[:end]).decode("utf-16-le")
        except UnicodeDecodeError as exc:
            raise ResourceFormatError(f"invalid package name: {exc}") from exc
        rest = _unpack(r, "<5I")
        return cls(package_id, name, *rest)

    def write(self, w: BinaryIO) -> None:
        raw = self.name.encode("utf-16-le")
        if len(raw) > _PACKAGE_NAME_UNITS * 2:
            raise ValueError(f"package name too long: {self.name!r}")
        _pack(w, "<I", self.id)
        w.write(raw.ljust(_PACKAGE_NAME_UNITS * 2, b"\0"))
        _pack(
            w,
            "<5I",
            self.type_strings,
            self.last_public_type,
            self.key_strings,
            self.last_public_key,
            self.type_id_offset,
        )


@dataclass
class ResTableTypeSpecHeader:
    """Header of a type spec chunk; entry configuration masks follow."""

    id: int
    res0: int
    res1: int
    entry_count: int

    @classmethod
    def read(cls, r: BinaryIO) -> "ResTableTypeSpecHeader":
        return cls(*_unpack(r, "<BBHI"))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<BBHI", self.id, self.res0, self.res1, self.entry_count)


@dataclass
class ScreenType:
    """Orientation, touchscreen and density of a configuration."""

    orientation: int
    touchscreen: int
    density: int

    @classmethod
    def read(cls, r: BinaryIO) -> "ScreenType":
        return cls(*_unpack(r, "<BBH"))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<BBH", self.orientation, self.touchscreen, self.density)


@dataclass
class ResTableConfig:
    """Configuration a set of entries is meant for.

    Bytes beyond the fields understood here are kept verbatim in ``unknown``.
    """

    size: int
    imsi: int
    locale: int
    screen_type: ScreenType
    input: int
    screen_size: int
    version: int
    unknown: bytes = b""

    @classmethod
    def read(cls, r: BinaryIO) -> "ResTableConfig":
        size, imsi, locale = _unpack(r, "<III")
        screen_type = ScreenType.read(r)
        input_, screen_size, version = _unpack(r, "<III")
        if size < _CONFIG_FIXED_SIZE:
            raise ResourceFormatError(f"configuration size too small: {size}")
        unknown = _read_exact(r, size - _CONFIG_FIXED_SIZE)
        return cls(size, imsi, locale, screen_type, input_, screen_size, version, unknown)

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<III", self.size, self.imsi, self.locale)
        self.screen_type.write(w)
        _pack(w, "<III", self.input, self.screen_size, self.version)
        w.write(bytes(self.unknown))


@dataclass
class ResTableTypeHeader:
    """Header of a type chunk; entry offsets and entries follow."""

    id: int
    res0: int
    res1: int
    entry_count: int
    entries_start: int
    config: ResTableConfig

    @classmethod
    def read(cls, r: BinaryIO) -> "ResTableTypeHeader":
        fixed = _unpack(r, "<BBHII")
        return cls(*fixed, ResTableConfig.read(r))

    def write(self, w: BinaryIO) -> None:
        _pack(
            w,
            "<BBHII",
            self.id,
            self.res0,
            self.res1,
            self.entry_count,
            self.entries_start,
        )
        self.config.write(w)


@dataclass
class ResTableMapEntry:
    """Parent reference and map count of a complex entry."""

    parent: int
    count: int

    @classmethod
    def read(cls, r: BinaryIO) -> "ResTableMapEntry":
        return cls(*_unpack(r, "<II"))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<II", self.parent, self.count)


@dataclass
class ResTableMap:
    """One name/value pair of a complex entry."""

    name: int
    value: ResValue

    @classmethod
    def read(cls, r: BinaryIO) -> "ResTableMap":
        (name,) = _unpack(r, "<I")
        return cls(name, ResValue.read(r))

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<I", self.name)
        self.value.write(w)


@dataclass
class ComplexValue:
    """The value of a complex entry: a map header and its pairs."""

    entry: ResTableMapEntry
    maps: list[ResTableMap] = field(default_factory=list)

    @classmethod
    def read(cls, r: BinaryIO) -> "ComplexValue":
        entry = ResTableMapEntry.read(r)
        maps = [ResTableMap.read(r) for _ in range(entry.count)]
        return cls(entry, maps)

    def write(self, w: BinaryIO) -> None:
        self.entry.write(w)
        for item in self.maps:
            item.write(w)


@dataclass
class ResTableEntry:
    """An entry of a type chunk, holding a simple or complex value."""

    FLAG_COMPLEX: ClassVar[int] = 0x1
    FLAG_PUBLIC: ClassVar[int] = 0x2

    size: int
    flags: int
    key: int
    value: Union[ResValue, ComplexValue]

    def is_complex(self) -> bool:
        return bool(self.flags & self.FLAG_COMPLEX)

    def is_public(self) -> bool:
        return bool(self.flags & self.FLAG_PUBLIC)

    @classmethod
    def read(cls, r: BinaryIO) -> "ResTableEntry":
        size, flags, key = _unpack(r, "<HHI")
        value: Union[ResValue, ComplexValue]
        if flags & cls.FLAG_COMPLEX:
            value = ComplexValue.read(r)
        else:
            value = ResValue.read(r)
        return cls(size, flags, key, value)

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<HHI", self.size, self.flags, self.key)
        self.value.write(w)


@dataclass
class ResSpan:
    """A style span over a range of characters of a pooled string."""

    name: int
    first_char: int
    last_char: int

    @classmethod
    def read(cls, r: BinaryIO) -> Optional["ResSpan"]:
        """Read a span, or return None at the end-of-spans marker."""
        (name,) = _unpack(r, "<i")
        if name == -1:
            return None
        first_char, last_char = _unpack(r, "<II")
        return cls(name, first_char, last_char)

    def write(self, w: BinaryIO) -> None:
        _pack(w, "<iII", self.name, self.first_char, self.last_char)