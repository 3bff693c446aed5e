"""The ``Info.plist`` document of an application bundle."""

from __future__ import annotations

import plistlib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from typing import Any, Optional

__all__ = ["CfBundlePrimaryIcon", "CfBundleIcons", "UiLaunchScreen", "InfoPlist"]

_U64_MAX = (1 << 64) - 1


def _opt(key: str, kind: str, cls: Optional[type] = None) -> Any:
    return field(
        default=None, metadata={"key": key, "kind": kind, "type": cls, "optional": True}
    )


def _list(key: str) -> Any:
    return field(
        default_factory=list,
        metadata={"key": key, "kind": "strs", "type": None, "optional": False},
    )


@dataclass
class CfBundlePrimaryIcon:
    """The primary icon of a bundle."""

    cf_bundle_icon_name: Optional[str] = _opt("CFBundleIconName", "str")


@dataclass
class CfBundleIcons:
    """The icons of a bundle."""

    cf_bundle_primary_icon: Optional[CfBundlePrimaryIcon] = _opt(
        "CFBundlePrimaryIcon", "struct", CfBundlePrimaryIcon
    )


@dataclass
class UiLaunchScreen:
    """The launch screen of an iOS application."""

    ui_color_name: Optional[str] = _opt("UIColorName", "str")
    ui_image_name: Optional[str] = _opt("UIImageName", "str")
    ui_image_respects_safe_area_insets: Optional[bool] = _opt(
        "UIImageRespectsSafeAreaInsets", "bool"
    )
    ui_navigation_bar: Optional[bool] = _opt("UINavigationBar", "bool")
    ui_tab_bar: Optional[bool] = _opt("UITabBar", "bool")
    ui_toolbar: Optional[bool] = _opt("UIToolbar", "bool")


@dataclass
class InfoPlist:
    """Bundle information; unset optional values are left out of the plist."""

    cf_bundle_development_region: Optional[str] = _opt("CFBundleDevelopmentRegion", "str")
    cf_bundle_display_name: Optional[str] = _opt("CFBundleDisplayName", "str")
    cf_bundle_executable: Optional[str] = _opt("CFBundleExecutable", "str")
    cf_bundle_icons: Optional[CfBundleIcons] = _opt(
        "CFBundleIcons", "struct", CfBundleIcons
    )
    cf_bundle_icon_file: Optional[str] = _opt("CFBundleIconFile", "str")
    cf_bundle_icon_files: list[str] = _list("CFBundleIconFiles")
    cf_bundle_icon_name: Optional[str] = _opt("CFBundleIconName", "str")
    cf_bundle_identifier: Optional[str] = _opt("CFBundleIdentifier", "str")
    cf_bundle_info_dictionary_version: Optional[str] = _opt(
        "CFBundleInfoDictionaryVersion", "str"
    )
    cf_bundle_name: Optional[str] = _opt("CFBundleName", "str")
    cf_bundle_package_type: Optional[str] = _opt("CFBundlePackageType", "str")
    cf_bundle_short_version_string: Optional[str] = _opt(
        "CFBundleShortVersionString", "str"
    )
    cf_bundle_spoken_name: Optional[str] = _opt("CFBundleSpokenName", "str")
    cf_bundle_supported_platforms: Optional[list[str]] = _opt(
        "CFBundleSupportedPlatforms", "strs"
    )
    cf_bundle_version: Optional[str] = _opt("CFBundleVersion", "str")

    dt_compiler: Optional[str] = _opt("DTCompiler", "str")
    dt_platform_build: Optional[str] = _opt("DTPlatformBuild", "str")
    dt_platform_name: Optional[str] = _opt("DTPlatformName", "str")
    dt_platform_version: Optional[str] = _opt("DTPlatformVersion", "str")
    dt_sdk_build: Optional[str] = _opt("DTSDKBuild", "str")
    dt_sdk_name: Optional[str] = _opt("DTSDKName", "str")
    dt_xcode: Optional[str] = _opt("DTXcode", "str")
    dt_xcode_build: Optional[str] = _opt("DTXcodeBuild", "str")

    ls_application_category_type: Optional[str] = _opt(
        "LSApplicationCategoryType", "str"
    )
    ls_minimum_system_version: Optional[str] = _opt("LSMinimumSystemVersion", "str")
    ls_requires_ios: Optional[bool] = _opt("LSRequiresIPhoneOS", "bool")

    minimum_os_version: Optional[str] = _opt("MinimumOSVersion", "str")

    ns_camera_usage_description: Optional[str] = _opt("NSCameraUsageDescription", "str")
    ns_human_readable_copyright: Optional[str] = _opt("NSHumanReadableCopyright", "str")

    ui_device_family: Optional[list[int]] = _opt("UIDeviceFamily", "ints")
    ui_launch_screen: Optional[UiLaunchScreen] = _opt(
        "UILaunchScreen", "struct", UiLaunchScreen
    )
    ui_launch_storyboard_name: Optional[str] = _opt("UILaunchStoryboardName", "str")
    ui_required_device_capabilities: Optional[list[str]] = _opt(
        "UIRequiredDeviceCapabilities", "strs"
    )
    ui_supported_interface_orientations_ipad: list[str] = _list(
        "UISupportedInterfaceOrientations~ipad"
    )
    ui_supported_interface_orientations_iphone: list[str] = _list(
        "UISupportedInterfaceOrientations~iphone"
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InfoPlist":
        """Build from a mapping keyed by field name; bad input raises ValueError."""
        return _from_dict(cls, data, "info")

    def to_plist(self) -> dict[str, Any]:
        """The property-list dictionary, keyed by the plist key names."""
        return _to_plist(self)

    def dumps(self) -> bytes:
        """Serialize as an XML property list."""
        return plistlib.dumps(self.to_plist(), fmt=plistlib.FMT_XML, sort_keys=False)


def _as_list(value: Any, where: str) -> list:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise ValueError(f"{where}: expected a list")
    return list(value)


def _check(value: Any, meta: Mapping[str, Any], where: str) -> Any:
    kind = meta["kind"]
    if kind == "str":
        if isinstance(value, str):
            return value
    elif kind == "bool":
        if isinstance(value, bool):
            return value
    elif kind == "strs":
        items = _as_list(value, where)
        if all(isinstance(item, str) for item in items):
            return items
    elif kind == "ints":
        items = _as_list(value, where)
        if all(
            isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= _U64_MAX
            for item in items
        ):
            return items
    elif kind == "struct":
        return _from_dict(meta["type"], value, where)
    raise ValueError(f"{where}: invalid value {value!r}")


def _from_dict(cls: type, data: Any, where: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{where}: expected a mapping, got {type(data).__name__}")
    known = {f.name: f for f in fields(cls)}
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        raise ValueError(f"{where}: unknown field(s) {', '.join(unknown)}")
    kwargs: dict[str, Any] = {}
    for name, value in data.items():
        meta = known[name].metadata
        path = f"{where}.{name}"
        if value is None and meta["optional"]:
            kwargs[name] = None
        else:
            kwargs[name] = _check(value, meta, path)
    return cls(**kwargs)


def _to_plist(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(obj):
        meta = f.metadata
        value = getattr(obj, f.name)
        if value is None:
            continue
        if meta["kind"] == "struct":
            out[meta["key"]] = _to_plist(value)
        elif meta["kind"] in ("strs", "ints"):
            out[meta["key"]] = list(value)
        else:
            out[meta["key"]] = value
    return out