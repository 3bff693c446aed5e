import xml.etree.ElementTree as ET

import pytest

from bundlekit.appx_manifest import (
    FOUNDATION_NAMESPACE,
    RESCAP_NAMESPACE,
    UAP_NAMESPACE,
    Application,
    Applications,
    AppxManifest,
    Capability,
    CapabilityKind,
    DefaultTile,
    Dependencies,
    Identity,
    LockScreen,
    Properties,
    Resource,
    Resources,
    ShowNameOnTiles,
    ShowOn,
    SplashScreen,
    TargetDeviceFamily,
    VisualElements,
)

F = "{" + FOUNDATION_NAMESPACE + "}"
U = "{" + UAP_NAMESPACE + "}"
R = "{" + RESCAP_NAMESPACE + "}"


def sample_manifest():
    return AppxManifest(
        identity=Identity(
            name="com.flutter.fluttertodoapp",
            version="1.0.0.0",
            publisher="CN=Msix Testing, O=Msix Testing Corporation, S=Some-State, C=US",
            processor_architecture="x64",
        ),
        properties=Properties(
            display_name="fluttertodoapp",
            publisher_display_name="com.flutter.fluttertodoapp",
            logo="Images\\StoreLogo.png",
            description="A new Flutter project.",
        ),
        resources=Resources(resource=[Resource(language="en")]),
        dependencies=Dependencies(target_device_family=[TargetDeviceFamily()]),
        capabilities=[
            Capability(CapabilityKind.CAPABILITY, "internetClient"),
            Capability(CapabilityKind.RESTRICTED, "runFullTrust"),
            Capability(CapabilityKind.DEVICE, "location"),
        ],
        applications=Applications(
            application=[
                Application(
                    id="fluttertodoapp",
                    executable="todoapp.exe",
                    entry_point="Windows.FullTrustApplication",
                    visual_elements=VisualElements(
                        background_color="transparent",
                        display_name="fluttertodoapp",
                        description="A new flutter project.",
                        logo_44x44="Images\\Square44x44Logo.png",
                        logo_150x150="Images\\Square150x150Logo.png",
                        default_tile=DefaultTile(
                            short_name="fluttertodoapp",
                            logo_71x71="Images\\SmallTile.png",
                            logo_310x310="Images\\LargeTile.png",
                            logo_310x150="Images\\Wide310x150Logo.png",
                            show_names_on_tiles=ShowNameOnTiles(
                                show_on=[
                                    ShowOn(tile="square150x150Logo"),
                                    ShowOn(tile="square310x310Logo"),
                                    ShowOn(tile="wide310x150Logo"),
                                ]
                            ),
                        ),
                        splash_screen=SplashScreen(image="Images\\SplashScreen.png"),
                        lock_screen=LockScreen(
                            badge_logo="Images\\BadgeLogo.png", notification="badge"
                        ),
                    ),
                )
            ]
        ),
    )


def sample_dict():
    return {
        "identity": {
            "name": "com.flutter.fluttertodoapp",
            "version": "1.0.0.0",
            "publisher": "CN=Msix Testing, O=Msix Testing Corporation, S=Some-State, C=US",
            "processor_architecture": "x64",
        },
        "properties": {
            "display_name": "fluttertodoapp",
            "publisher_display_name": "com.flutter.fluttertodoapp",
            "logo": "Images\\StoreLogo.png",
            "description": "A new Flutter project.",
        },
        "resources": {"resource": [{"language": "en"}]},
        "dependencies": {
            "target_device_family": [
                {
                    "name": "Windows.Desktop",
                    "min_version": "10.0.0.0",
                    "max_version": "10.0.20348.0",
                }
            ]
        },
        "capabilities": [
            {"capability": {"name": "internetClient"}},
            {"restricted": {"name": "runFullTrust"}},
            {"device": {"name": "location"}},
        ],
        "applications": {
            "application": [
                {
                    "id": "fluttertodoapp",
                    "executable": "todoapp.exe",
                    "entry_point": "Windows.FullTrustApplication",
                    "visual_elements": {
                        "background_color": "transparent",
                        "display_name": "fluttertodoapp",
                        "description": "A new flutter project.",
                        "logo_44x44": "Images\\Square44x44Logo.png",
                        "logo_150x150": "Images\\Square150x150Logo.png",
                        "default_tile": {
                            "short_name": "fluttertodoapp",
                            "logo_71x71": "Images\\SmallTile.png",
                            "logo_310x310": "Images\\LargeTile.png",
                            "logo_310x150": "Images\\Wide310x150Logo.png",
                            "show_names_on_tiles": {
                                "show_on": [
                                    {"tile": "square150x150Logo"},
                                    {"tile": "square310x310Logo"},
                                    {"tile": "wide310x150Logo"},
                                ]
                            },
                        },
                        "splash_screen": {"image": "Images\\SplashScreen.png"},
                        "lock_screen": {
                            "badge_logo": "Images\\BadgeLogo.png",
                            "notification": "badge",
                        },
                    },
                }
            ]
        },
    }


def test_properties():
    props = Properties(
        display_name="", publisher_display_name="", logo="", description=""
    )
    assert props.to_xml() == (
        "<Properties><DisplayName></DisplayName><PublisherDisplayName>"
        "</PublisherDisplayName><Logo></Logo><Description></Description></Properties>"
    )


def test_properties_text_is_escaped():
    xml = Properties(display_name="a & <b>").to_xml()
    assert "<DisplayName>a &amp; &lt;b&gt;</DisplayName>" in xml


def test_manifest_root_and_identity():
    root = ET.fromstring(sample_manifest().to_xml())
    assert root.tag == F + "Package"
    identity = root.find(F + "Identity")
    assert identity.attrib["Name"] == "com.flutter.fluttertodoapp"
    assert identity.attrib["ProcessorArchitecture"] == "x64"


def test_manifest_properties_are_elements():
    root = ET.fromstring(sample_manifest().to_xml())
    props = root.find(F + "Properties")
    assert props.find(F + "Logo").text == "Images\\StoreLogo.png"
    assert props.find(F + "Description").text == "A new Flutter project."


def test_manifest_capabilities():
    root = ET.fromstring(sample_manifest().to_xml())
    caps = list(root.find(F + "Capabilities"))
    assert [c.tag for c in caps] == [
        F + "Capability",
        R + "Capability",
        F + "DeviceCapability",
    ]
    assert [c.attrib["Name"] for c in caps] == [
        "internetClient",
        "runFullTrust",
        "location",
    ]


def test_manifest_default_device_family():
    xml = sample_manifest().to_xml()
    assert (
        '<TargetDeviceFamily Name="Windows.Desktop" MinVersion="10.0.0.0" '
        'MaxVersionTested="10.0.20348.0"/>'
    ) in xml


def test_manifest_visual_elements():
    root = ET.fromstring(sample_manifest().to_xml())
    app = root.find(F + "Applications").find(F + "Application")
    assert app.attrib["EntryPoint"] == "Windows.FullTrustApplication"
    visual = app.find(U + "VisualElements")
    assert visual.attrib["Square44x44Logo"] == "Images\\Square44x44Logo.png"
    tile = visual.find(U + "DefaultTile")
    tiles = [s.attrib["Tile"] for s in tile.find(U + "ShowNameOnTiles")]
    assert tiles == ["square150x150Logo", "square310x310Logo", "wide310x150Logo"]
    assert visual.find(U + "LockScreen").attrib["Notification"] == "badge"


def test_from_dict_matches_constructed():
    assert AppxManifest.from_dict(sample_dict()) == sample_manifest()


def test_from_dict_round_trips_xml():
    assert AppxManifest.from_dict(sample_dict()).to_xml() == sample_manifest().to_xml()


def test_from_dict_missing_identity():
    data = sample_dict()
    del data["identity"]
    with pytest.raises(ValueError):
        AppxManifest.from_dict(data)


def test_from_dict_unknown_capability_kind():
    data = sample_dict()
    data["capabilities"] = [{"special": {"name": "x"}}]
    with pytest.raises(ValueError):
        AppxManifest.from_dict(data)


def test_from_dict_resource_needs_language():
    data = sample_dict()
    data["resources"] = {"resource": [{}]}
    with pytest.raises(ValueError):
        AppxManifest.from_dict(data)


def test_from_dict_rejects_wrong_type():
    data = sample_dict()
    data["identity"]["name"] = 5
    with pytest.raises(ValueError):
        AppxManifest.from_dict(data)


def test_default_manifest_declares_namespaces():
    root_start = AppxManifest().to_xml().split(">", 1)[0]
    assert f'xmlns="{FOUNDATION_NAMESPACE}"' in root_start
    assert f'xmlns:uap="{UAP_NAMESPACE}"' in root_start
    assert f'xmlns:rescap="{RESCAP_NAMESPACE}"' in root_start