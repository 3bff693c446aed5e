"""Building blocks for Android, MSIX, macOS/iOS bundle and AppImage packages."""

__version__ = "0.1.0"

__all__ = [
    "resources",
    "versioning",
    "android_manifest",
    "appx_manifest",
    "block_map",
    "content_types",
    "info_plist",
    "appbundle",
    "appimage",
]