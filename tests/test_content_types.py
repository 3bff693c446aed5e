import xml.etree.ElementTree as ET

import pytest

from bundlekit.content_types import (
    CONTENT_TYPES_NAMESPACE,
    ContentTypes,
    ContentTypesBuilder,
    DefaultRule,
    OverrideRule,
)


def test_default_rules_are_overrides():
    assert ContentTypes().rules == [
        OverrideRule("/AppxBlockMap.xml", "application/vnd.ms-appx.blockmap+xml"),
        OverrideRule("/AppxSignature.p7x", "application/vnd.ms-appx.signature"),
    ]


def test_to_xml_parses_with_namespace():
    root = ET.fromstring(ContentTypes().to_xml())
    ns = "{" + CONTENT_TYPES_NAMESPACE + "}"
    assert root.tag == ns + "Types"
    parts = [child.attrib["PartName"] for child in root.findall(ns + "Override")]
    assert parts == ["/AppxBlockMap.xml", "/AppxSignature.p7x"]


def test_extension_added_once():
    builder = ContentTypesBuilder()
    builder.add("a.png")
    builder.add("Images/b.scale-100.png")
    rules = builder.finish().rules
    defaults = [r for r in rules if isinstance(r, DefaultRule)]
    assert defaults == [DefaultRule("png", "image/png")]


def test_paths_without_extension_ignored():
    builder = ContentTypesBuilder()
    builder.add("LICENSE")
    builder.add("dir/.hidden")
    assert len(builder.finish().rules) == len(ContentTypes().rules)


def test_unknown_extension_is_octet_stream():
    builder = ContentTypesBuilder()
    builder.add("data.zzqqxx")
    rule = builder.finish().rules[-1]
    assert rule == DefaultRule("zzqqxx", "application/octet-stream")


def test_rules_keep_insertion_order():
    builder = ContentTypesBuilder()
    for name in ("x.zzqqb", "y.zzqqa", "z.zzqqb"):
        builder.add(name)
    exts = [r.ext for r in builder.finish().rules if isinstance(r, DefaultRule)]
    assert exts == ["zzqqb", "zzqqa"]


def test_default_rule_xml():
    xml = ContentTypes(rules=[DefaultRule("exe", "application/x-msdownload")]).to_xml()
    assert '<Default Extension="exe" ContentType="application/x-msdownload"/>' in xml


def test_finish_twice_raises():
    builder = ContentTypesBuilder()
    builder.finish()
    with pytest.raises(RuntimeError):
        builder.finish()


def test_add_after_finish_raises():
    builder = ContentTypesBuilder()
    builder.finish()
    with pytest.raises(RuntimeError):
        builder.add("a.png")