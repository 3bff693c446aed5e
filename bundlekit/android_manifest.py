"""The Android manifest document model and its XML serialization."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Optional

from lxml import etree

__all__ = [
    "ANDROID_NAMESPACE",
    "Sdk",
    "Feature",
    "Permission",
    "MetaData",
    "IntentFilterData",
    "IntentFilter",
    "Activity",
    "Application",
    "AndroidManifest",
]

ANDROID_NAMESPACE = "http://schemas.android.com/apk/res/android"
_ANDROID_PREFIX = "android:"


def _attr(xml_name: str, kind: str, **kwargs: Any) -> Any:
    return field(metadata={"attr": xml_name, "kind": kind}, **kwargs)


def _child(xml_name: str, cls: type) -> Any:
    return field(default_factory=cls, metadata={"child": xml_name, "type": cls})


def _children(xml_name: str, cls: type) -> Any:
    return field(default_factory=list, metadata={"children": xml_name, "type": cls})


def _names(xml_name: str) -> Any:
    return field(default_factory=list, metadata={"names": xml_name})


@dataclass
class Sdk:
    """The ``uses-sdk`` element."""

    min_sdk_version: Optional[int] = _attr("android:minSdkVersion", "int", default=None)
    target_sdk_version: Optional[int] = _attr(
        "android:targetSdkVersion", "int", default=None
    )
    max_sdk_version: Optional[int] = _attr("android:maxSdkVersion", "int", default=None)


@dataclass
class Feature:
    """The ``uses-feature`` element."""

    name: Optional[str] = _attr("android:name", "str", default=None)
    required: Optional[bool] = _attr("android:required", "bool", default=None)
    version: Optional[int] = _attr("android:version", "int", default=None)
    opengles_version: Optional[tuple[int, int]] = _attr(
        "android:glEsVersion", "gles", default=None
    )


@dataclass
class Permission:
    """The ``uses-permission`` element."""

    name: str = _attr("android:name", "str")
    max_sdk_version: Optional[int] = _attr("android:maxSdkVersion", "int", default=None)


@dataclass
class MetaData:
    """The ``meta-data`` element."""

    name: str = _attr("android:name", "str")
    value: str = _attr("android:value", "str")


@dataclass
class IntentFilterData:
    """The ``data`` element of an intent filter."""

    scheme: Optional[str] = _attr("android:scheme", "str", default=None)
    host: Optional[str] = _attr("android:host", "str", default=None)
    port: Optional[str] = _attr("android:port", "str", default=None)
    path: Optional[str] = _attr("android:path", "str", default=None)
    path_pattern: Optional[str] = _attr("android:pathPattern", "str", default=None)
    path_prefix: Optional[str] = _attr("android:pathPrefix", "str", default=None)
    mime_type: Optional[str] = _attr("android:mimeType", "str", default=None)


@dataclass
class IntentFilter:
    """The ``intent-filter`` element; actions and categories become named children."""

    actions: list[str] = _names("action")
    categories: list[str] = _names("category")
    data: list[IntentFilterData] = _children("data", IntentFilterData)


@dataclass
class Activity:
    """The ``activity`` element."""

    config_changes: Optional[str] = _attr("android:configChanges", "str", default=None)
    label: Optional[str] = _attr("android:label", "str", default=None)
    launch_mode: Optional[str] = _attr("android:launchMode", "str", default=None)
    name: Optional[str] = _attr("android:name", "str", default=None)
    orientation: Optional[str] = _attr("android:screenOrientation", "str", default=None)
    window_soft_input_mode: Optional[str] = _attr(
        "android:windowSoftInputMode", "str", default=None
    )
    exported: Optional[bool] = _attr("android:exported", "bool", default=None)
    hardware_accelerated: Optional[bool] = _attr(
        "android:hardwareAccelerated", "bool", default=None
    )
    meta_data: list[MetaData] = _children("meta-data", MetaData)
    intent_filters: list[IntentFilter] = _children("intent-filter", IntentFilter)
    color_mode: Optional[str] = _attr("android:colorMode", "str", default=None)


@dataclass
class Application:
    """The ``application`` element."""

    debuggable: Optional[bool] = _attr("android:debuggable", "bool", default=None)
    theme: Optional[str] = _attr("android:theme", "str", default=None)
    has_code: Optional[bool] = _attr("android:hasCode", "bool", default=None)
    icon: Optional[str] = _attr("android:icon", "str", default=None)
    label: Optional[str] = _attr("android:label", "str", default=None)
    app_component_factory: Optional[str] = _attr(
        "android:appComponentFactory", "str", default=None
    )
    meta_data: list[MetaData] = _children("meta-data", MetaData)
    activities: list[Activity] = _children("activity", Activity)


@dataclass
class AndroidManifest:
    """The root ``manifest`` element."""

    ns_android: str = field(default=ANDROID_NAMESPACE, metadata={"kind": "str"})
    package: Optional[str] = _attr("package", "str", default=None)
    version_code: Optional[int] = _attr("android:versionCode", "int", default=None)
    version_name: Optional[str] = _attr("android:versionName", "str", default=None)
    compile_sdk_version: Optional[int] = _attr(
        "android:compileSdkVersion", "int", default=None
    )
    compile_sdk_version_codename: Optional[int] = _attr(
        "android:compileSdkVersionCodename", "int", default=None
    )
    platform_build_version_code: Optional[int] = _attr(
        "platformBuildVersionCode", "int", default=None
    )
    platform_build_version_name: Optional[int] = _attr(
        "platformBuildVersionName", "int", default=None
    )
    sdk: Sdk = _child("uses-sdk", Sdk)
    uses_feature: list[Feature] = _children("uses-feature", Feature)
    uses_permission: list[Permission] = _children("uses-permission", Permission)
    application: Application = _child("application", Application)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AndroidManifest":
        """Build a manifest from a mapping keyed by field name.

        Unknown keys, missing required values and wrongly typed values
        raise ValueError.
        """
        return _from_dict(cls, data, "manifest")

    def to_xml(self) -> str:
        """Serialize the manifest as an XML document string."""
        root = etree.Element("manifest", nsmap={"android": self.ns_android})
        _fill(root, self, self.ns_android)
        return etree.tostring(root, encoding="unicode")

    def __str__(self) -> str:
        return self.to_xml()


def _check(value: Any, kind: str, where: str) -> Any:
    if kind == "str":
        if isinstance(value, str):
            return value
    elif kind == "bool":
        if isinstance(value, bool):
            return value
    elif kind == "int":
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 0xFFFFFFFF:
            return value
    elif kind == "gles":
        if (
            isinstance(value, Sequence)
            and not isinstance(value, str)
            and len(value) == 2
            and all(
                isinstance(part, int) and not isinstance(part, bool) and 0 <= part <= 0xFF
                for part in value
            )
        ):
            return (value[0], value[1])
    raise ValueError(f"{where}: invalid value {value!r} for a {kind} field")


def _from_dict(cls: type, data: Any, where: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{where}: expected a mapping, got {type(data).__name__}")
    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"{where}: unknown field(s) {', '.join(map(str, unknown))}")
    missing = [
        f.name
        for f in known.values()
        if f.name not in data and f.default is MISSING and f.default_factory is MISSING
    ]
    if missing:
        raise ValueError(f"{where}: missing field(s) {', '.join(missing)}")

    kwargs: dict[str, Any] = {}
    for name, value in data.items():
        meta = known[name].metadata
        path = f"{where}.{name}"
        if "attr" in meta:
            if value is None and known[name].default is None:
                kwargs[name] = None
            else:
                kwargs[name] = _check(value, meta["kind"], path)
        elif "child" in meta:
            kwargs[name] = _from_dict(meta["type"], value, path)
        elif "children" in meta:
            kwargs[name] = [
                _from_dict(meta["type"], item, f"{path}[{i}]")
                for i, item in enumerate(_as_list(value, path))
            ]
        elif "names" in meta:
            kwargs[name] = [
                _check(item, "str", f"{path}[{i}]")
                for i, item in enumerate(_as_list(value, path))
            ]
        else:
            kwargs[name] = _check(value, meta["kind"], path)
    return cls(**kwargs)


def _as_list(value: Any, where: str) -> list:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise ValueError(f"{where}: expected a list")
    return list(value)


def _qname(xml_name: str, ns: str) -> str:
    if xml_name.startswith(_ANDROID_PREFIX):
        return f"{{{ns}}}{xml_name[len(_ANDROID_PREFIX):]}"
    return xml_name


def _format(value: Any, kind: str) -> str:
    if kind == "bool":
        return "true" if value else "false"
    if kind == "gles":
        major, minor = value
        return f"0x{major:04}{minor:04}"
    return str(value)


def _fill(element: Any, obj: Any, ns: str) -> None:
    for f in fields(obj):
        meta = f.metadata
        value = getattr(obj, f.name)
        if "attr" in meta:
            if value is not None:
                element.set(_qname(meta["attr"], ns), _format(value, meta["kind"]))
        elif "child" in meta:
            _fill(etree.SubElement(element, meta["child"]), value, ns)
        elif "children" in meta:
            for item in value:
                _fill(etree.SubElement(element, meta["children"]), item, ns)
        elif "names" in meta:
            for item in value:
                etree.SubElement(element, meta["names"]).set(_qname("android:name", ns), item)