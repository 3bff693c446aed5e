"""The MSIX package manifest (``AppxManifest.xml``) and its XML form."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Optional
from xml.sax.saxutils import escape

__all__ = [
    "FOUNDATION_NAMESPACE",
    "UAP_NAMESPACE",
    "RESCAP_NAMESPACE",
    "Identity",
    "Properties",
    "Resource",
    "Resources",
    "TargetDeviceFamily",
    "Dependencies",
    "CapabilityKind",
    "Capability",
    "ShowOn",
    "ShowNameOnTiles",
    "DefaultTile",
    "SplashScreen",
    "LockScreen",
    "VisualElements",
    "Application",
    "Applications",
    "AppxManifest",
]

FOUNDATION_NAMESPACE = "http://schemas.microsoft.com/appx/manifest/foundation/windows10"
UAP_NAMESPACE = "http://schemas.microsoft.com/appx/manifest/uap/windows10"
RESCAP_NAMESPACE = (
    "http://schemas.microsoft.com/appx/manifest/foundation/windows10/restrictedcapabilities"
)

_ATTR_ENTITIES = {'"': "&quot;"}


def _element(
    tag: str,
    attrs: Iterable[tuple[str, Optional[str]]] = (),
    children: Iterable[str] = (),
    text: Optional[str] = None,
) -> str:
    """Render one element; attributes whose value is None are left out."""
    attr_text = "".join(
        f' {name}="{escape(value, _ATTR_ENTITIES)}"'
        for name, value in attrs
        if value is not None
    )
    body = "".join(children)
    if text is not None:
        body = escape(text) + body
    elif not body:
        return f"<{tag}{attr_text}/>"
    return f"<{tag}{attr_text}>{body}</{tag}>"


def _attr(xml: str, default: Any = None, required: bool = False) -> Any:
    return field(
        default=default, metadata={"kind": "attr", "xml": xml, "required": required}
    )


def _text(xml: str) -> Any:
    return field(default=None, metadata={"kind": "text", "xml": xml})


def _child(xml: str, cls: type) -> Any:
    return field(
        default_factory=cls,
        metadata={"kind": "child", "xml": xml, "type": cls, "required": True},
    )


def _optional_child(xml: str, cls: type) -> Any:
    return field(default=None, metadata={"kind": "child", "xml": xml, "type": cls})


def _children(xml: str, cls: type) -> Any:
    return field(
        default_factory=list,
        metadata={"kind": "children", "xml": xml, "type": cls, "required": True},
    )


@dataclass
class Identity:
    """Identity of the package."""

    name: Optional[str] = _attr("Name")
    version: Optional[str] = _attr("Version")
    publisher: Optional[str] = _attr("Publisher")
    processor_architecture: Optional[str] = _attr("ProcessorArchitecture")


@dataclass
class Properties:
    """Display properties; each one is written as an element holding its text."""

    display_name: Optional[str] = _text("DisplayName")
    publisher_display_name: Optional[str] = _text("PublisherDisplayName")
    logo: Optional[str] = _text("Logo")
    description: Optional[str] = _text("Description")

    def to_xml(self) -> str:
        """Serialize as a ``Properties`` element."""
        return _serialize(self, "Properties")


@dataclass
class Resource:
    """A language the package supports."""

    language: str = _attr("Language", default=MISSING, required=True)


@dataclass
class Resources:
    resource: list[Resource] = _children("Resource", Resource)


@dataclass
class TargetDeviceFamily:
    """A device family the package targets, with its version range."""

    name: str = _attr("Name", default="Windows.Desktop", required=True)
    min_version: str = _attr("MinVersion", default="10.0.0.0", required=True)
    max_version: str = _attr("MaxVersionTested", default="10.0.20348.0", required=True)


@dataclass
class Dependencies:
    target_device_family: list[TargetDeviceFamily] = _children(
        "TargetDeviceFamily", TargetDeviceFamily
    )


class CapabilityKind(enum.Enum):
    """Kind of a capability, named as in manifest descriptions."""

    CAPABILITY = "capability"
    RESTRICTED = "restricted"
    DEVICE = "device"

    @property
    def tag(self) -> str:
        """Element name of this kind of capability."""
        return _CAPABILITY_TAGS[self]


_CAPABILITY_TAGS = {
    CapabilityKind.CAPABILITY: "Capability",
    CapabilityKind.RESTRICTED: "rescap:Capability",
    CapabilityKind.DEVICE: "DeviceCapability",
}


@dataclass
class Capability:
    """A capability the package declares."""

    kind: CapabilityKind
    name: str

    def _to_xml(self) -> str:
        return _element(self.kind.tag, [("Name", self.name)])

    @classmethod
    def _from_dict(cls, data: Any, where: str) -> "Capability":
        if not isinstance(data, Mapping) or len(data) != 1:
            raise ValueError(f"{where}: expected a mapping with one capability kind")
        ((key, body),) = data.items()
        try:
            kind = CapabilityKind(key)
        except ValueError:
            raise ValueError(f"{where}: unknown capability kind {key!r}") from None
        if not isinstance(body, Mapping) or not isinstance(body.get("name"), str):
            raise ValueError(f"{where}: capability needs a string name")
        return cls(kind, body["name"])


@dataclass
class ShowOn:
    tile: str = _attr("Tile", default="", required=True)


@dataclass
class ShowNameOnTiles:
    show_on: list[ShowOn] = _children("uap:ShowOn", ShowOn)


@dataclass
class DefaultTile:
    """The default tile of an application."""

    short_name: Optional[str] = _attr("ShortName")
    logo_71x71: Optional[str] = _attr("Square71x71Logo")
    logo_310x310: Optional[str] = _attr("Square310x310Logo")
    logo_310x150: Optional[str] = _attr("Wide310x150Logo")
    show_names_on_tiles: ShowNameOnTiles = _child("uap:ShowNameOnTiles", ShowNameOnTiles)


@dataclass
class SplashScreen:
    image: str = _attr("Image", default="", required=True)


@dataclass
class LockScreen:
    badge_logo: str = _attr("BadgeLogo", default="", required=True)
    notification: str = _attr("Notification", default="", required=True)


@dataclass
class VisualElements:
    """How an application appears to the user."""

    background_color: Optional[str] = _attr("BackgroundColor")
    display_name: Optional[str] = _attr("DisplayName")
    description: Optional[str] = _attr("Description")
    logo_150x150: Optional[str] = _attr("Square150x150Logo")
    logo_44x44: Optional[str] = _attr("Square44x44Logo")
    default_tile: Optional[DefaultTile] = _optional_child("uap:DefaultTile", DefaultTile)
    splash_screen: Optional[SplashScreen] = _optional_child(
        "uap:SplashScreen", SplashScreen
    )
    lock_screen: Optional[LockScreen] = _optional_child("uap:LockScreen", LockScreen)


@dataclass
class Application:
    """An application in the package."""

    id: Optional[str] = _attr("Id")
    executable: Optional[str] = _attr("Executable")
    entry_point: Optional[str] = _attr("EntryPoint")
    visual_elements: VisualElements = _child("uap:VisualElements", VisualElements)


@dataclass
class Applications:
    application: list[Application] = _children("Application", Application)


@dataclass
class AppxManifest:
    """The root ``Package`` element."""

    ns: str = _attr("xmlns", default=FOUNDATION_NAMESPACE)
    ns_uap: str = _attr("xmlns:uap", default=UAP_NAMESPACE)
    ns_rescap: str = _attr("xmlns:rescap", default=RESCAP_NAMESPACE)
    identity: Identity = _child("Identity", Identity)
    properties: Properties = _child("Properties", Properties)
    resources: Resources = _child("Resources", Resources)
    dependencies: Dependencies = _child("Dependencies", Dependencies)
    capabilities: list[Capability] = field(
        default_factory=list,
        metadata={"kind": "capabilities", "xml": "Capabilities", "required": True},
    )
    applications: Applications = _child("Applications", Applications)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppxManifest":
        """Build a manifest from a mapping keyed by field name.

        Capabilities are mappings such as ``{"restricted": {"name": ...}}``.
        Missing required values and wrongly typed values raise ValueError.
        """
        return _from_dict(cls, data, "manifest")

    def to_xml(self) -> str:
        """Serialize as a ``Package`` element."""
        return _serialize(self, "Package")


def _serialize(obj: Any, tag: str) -> str:
    attrs: list[tuple[str, Optional[str]]] = []
    children: list[str] = []
    for f in fields(obj):
        meta = f.metadata
        kind = meta.get("kind")
        value = getattr(obj, f.name)
        if kind == "attr":
            attrs.append((meta["xml"], value))
        elif kind == "text":
            if value is not None:
                children.append(_element(meta["xml"], text=value))
        elif kind == "child":
            if value is not None:
                children.append(_serialize(value, meta["xml"]))
        elif kind == "children":
            children.extend(_serialize(item, meta["xml"]) for item in value)
        elif kind == "capabilities":
            children.append(
                _element(meta["xml"], children=[item._to_xml() for item in value])
            )
    return _element(tag, attrs, children)


def _as_list(value: Any, where: str) -> list:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise ValueError(f"{where}: expected a list")
    return list(value)


def _from_dict(cls: type, data: Any, where: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{where}: expected a mapping, got {type(data).__name__}")
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        meta = f.metadata
        kind = meta.get("kind")
        path = f"{where}.{f.name}"
        if f.name not in data:
            if meta.get("required"):
                raise ValueError(f"{path}: missing field")
            continue
        value = data[f.name]
        if kind in ("attr", "text"):
            if value is None and f.default is None:
                kwargs[f.name] = None
            elif isinstance(value, str):
                kwargs[f.name] = value
            else:
                raise ValueError(f"{path}: expected a string, got {value!r}")
        elif kind == "child":
            if value is None and f.default is None:
                kwargs[f.name] = None
            else:
                kwargs[f.name] = _from_dict(meta["type"], value, path)
        elif kind == "children":
            kwargs[f.name] = [
                _from_dict(meta["type"], item, f"{path}[{i}]")
                for i, item in enumerate(_as_list(value, path))
            ]
        elif kind == "capabilities":
            kwargs[f.name] = [
                Capability._from_dict(item, f"{path}[{i}]")
                for i, item in enumerate(_as_list(value, path))
            ]
    return cls(**kwargs)