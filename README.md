# bundlekit

`bundlekit` is a library of building blocks for application packages on
several platforms:

- **Android**: the fixed-layout binary structures of the compiled resource
  format (`bundlekit.resources`), ABI names and version codes
  (`bundlekit.versioning`), and the `AndroidManifest.xml` document model
  (`bundlekit.android_manifest`).
- **MSIX / AppX**: the `AppxManifest.xml` model (`bundlekit.appx_manifest`),
  the block map `AppxBlockMap.xml` (`bundlekit.block_map`) and the
  `[Content_Types].xml` part (`bundlekit.content_types`).
- **macOS / iOS**: the `Info.plist` model (`bundlekit.info_plist`) and the
  layout of an `.app` directory (`bundlekit.appbundle`).
- **Linux**: the layout of an `.AppDir` and packing it into an AppImage
  (`bundlekit.appimage`).

The only runtime dependency is `lxml`, used to write Android manifests.

## Android

### Version codes and ABIs

```python
from bundlekit.versioning import Target, VersionCode

version = VersionCode.from_semver("254.254.254-alpha.fix+2")
print(version)                         # VersionCode(major=254, minor=254, patch=254)
print(version.to_code(1))              # apk id in the top byte, then major, minor, patch
print(Target.ARM64_V8A.android_abi())  # arm64-v8a
```

`from_semver` takes the first three parts separated by `.`, `-` or `+`;
each must be a number from 0 to 255, otherwise `ValueError` is raised.

### Resource structures

Each structure in `bundlekit.resources` is a dataclass with a `read`
classmethod taking a binary stream and a `write` method emitting the exact
little-endian layout:

```python
import io
from bundlekit.resources import ResChunkHeader, ResTableRef, ChunkType

header = ResChunkHeader(ChunkType.STRING_POOL, 28, 100)
buf = io.BytesIO()
header.write(buf)
buf.seek(0)
assert ResChunkHeader.read(buf) == header

ref = ResTableRef.new(0x01, 0x01, 0x0573)
print(hex(int(ref)), ref.package(), ref.ty(), ref.entry())
```

The module also has the enums `ChunkType`, `ResValueType` and
`ResAttributeType`, string pool, XML node, table package, type, type spec,
configuration and entry headers, typed values (`ResValue`), complex values
(`ComplexValue`, `ResTableMapEntry`, `ResTableMap`) and style spans
(`ResSpan`). Truncated or malformed input raises
`bundlekit.resources.ResourceFormatError`, a `ValueError`.

### Android manifest

```python
from bundlekit.android_manifest import AndroidManifest

manifest = AndroidManifest.from_dict({
    "package": "com.example.hello",
    "version_code": 1,
    "sdk": {"min_sdk_version": 21, "target_sdk_version": 33},
    "application": {
        "label": "hello",
        "debuggable": True,
        "activities": [{
            "name": ".MainActivity",
            "intent_filters": [{
                "actions": ["android.intent.action.MAIN"],
                "categories": ["android.intent.category.LAUNCHER"],
            }],
        }],
    },
})
print(manifest.to_xml())
```

`from_dict` rejects unknown keys, missing required values and wrongly
typed values with `ValueError`. Unset optional attributes are left out of
the XML; `Feature.opengles_version` is written as `0xMMMMmmmm`.

## MSIX

```python
import io
from bundlekit.appx_manifest import (
    AppxManifest, Identity, Capability, CapabilityKind,
)
from bundlekit.block_map import BlockMapBuilder
from bundlekit.content_types import ContentTypesBuilder

manifest = AppxManifest(
    identity=Identity(name="com.example.hello", version="1.0.0.0"),
    capabilities=[Capability(CapabilityKind.RESTRICTED, "runFullTrust")],
)
print(manifest.to_xml())

types = ContentTypesBuilder()
types.add("Images/StoreLogo.png")
types.add("hello.exe")
print(types.finish().to_xml())

blocks = BlockMapBuilder()
blocks.add("Images/StoreLogo.png", io.BytesIO(b"..."))
print(blocks.finish().to_xml())
```

`AppxManifest.from_dict` builds a manifest from a mapping; it needs the
keys `identity`, `properties`, `resources`, `dependencies`, `capabilities`
and `applications`, and capabilities are written as mappings such as
`{"restricted": {"name": "runFullTrust"}}`.

The block map hashes every 64 KiB block with SHA-256 and stores member
names with `\` separators. The content types start with the overrides for
`/AppxBlockMap.xml` and `/AppxSignature.p7x` and add one default rule per
new file extension, guessing the MIME type from the standard `mimetypes`
tables and falling back to `application/octet-stream`.

## macOS and iOS bundles

```python
from bundlekit.info_plist import InfoPlist
from bundlekit.appbundle import AppBundle, app_bundle_identifier

info = InfoPlist.from_dict({
    "cf_bundle_name": "Hello",
    "cf_bundle_identifier": "com.example.hello",
})
bundle = AppBundle("build", info)
bundle.add_executable("target/hello")
bundle.add_file("assets/config.json", "config.json")
plist_path = bundle.finish()          # writes Info.plist

print(app_bundle_identifier(bundle.appdir))
```

When `ls_requires_ios` is `True` the bundle uses the flat iOS layout;
otherwise files go under `Contents/` (`Resources`, `MacOS`, `Frameworks`).
The first executable added becomes `CFBundleExecutable` unless one is set.
`InfoPlist.to_plist` returns the dictionary and `InfoPlist.dumps` the XML
property list; unset optional values are left out.

## AppImage

```python
from pathlib import Path
from bundlekit.appimage import AppImage

image = AppImage("build", "hello")
image.add_file("target/hello", "hello")
image.add_apprun()
image.add_desktop()
image.add_icon("icon.png")
image.build("hello.AppImage", runtime=Path("runtime-x86_64").read_bytes())
```

`AppImage.build` runs `mksquashfs`, which must be on the `PATH`, writes the
given runtime bytes followed by the squashfs image, and makes the result
executable. Symbolic links (`AppRun`, `.DirIcon`) are only made on POSIX
systems.

## What the package does not do

- It does not parse or write whole resource files: there is no chunk
  tree, no `resources.arsc` or binary `AndroidManifest.xml` reader or
  writer, no lookup in a platform resource table, and no compiling of a
  manifest into binary XML. Only the individual structures are provided.
- It does not write APK, MSIX or zip archives, and it signs nothing: no APK
  signing block, no MSIX signature, no code signing or notarization of
  bundles or AppImages.
- It does not scale or convert icons; icon files are copied as given.
- It has no command-line interface.