import io
import xml.etree.ElementTree as ET

from bundlekit.block_map import (
    BLOCK_SIZE,
    BLOCKMAP_NAMESPACE,
    AppxBlockMap,
    Block,
    BlockFile,
    BlockMapBuilder,
)

EMPTY_SHA256_B64 = "47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU="


def test_block_map():
    block_map = AppxBlockMap()
    entry = BlockFile(name="file.ext", size=12, lfh_size=30)
    entry.blocks.append(Block(hash="base64", size=12))
    block_map.files.append(entry)
    assert block_map.to_xml() == (
        '<BlockMap xmlns="http://schemas.microsoft.com/appx/2010/blockmap" '
        'HashMethod="http://www.w3.org/2001/04/xmlenc#sha256">'
        '<File Name="file.ext" Size="12" LfhSize="30">'
        '<Block Hash="base64" Size="12"/></File></BlockMap>'
    )


def test_block_without_size_omits_attribute():
    xml = AppxBlockMap(files=[BlockFile("a", 0, 31, [Block("h")])]).to_xml()
    assert '<Block Hash="h"/>' in xml


def test_block_hash_of_empty_data():
    assert Block.from_bytes(b"").hash == EMPTY_SHA256_B64


def test_builder_empty_file_has_one_block():
    builder = BlockMapBuilder()
    builder.add("empty.txt", io.BytesIO(b""))
    entry = builder.finish().files[0]
    assert entry.size == 0
    assert [b.hash for b in entry.blocks] == [EMPTY_SHA256_B64]


def test_builder_joins_path_with_backslashes():
    builder = BlockMapBuilder()
    entry = builder.add("dir/sub/file.txt", io.BytesIO(b"hello"))
    assert entry.name == "dir\\sub\\file.txt"
    assert entry.lfh_size == 30 + len(entry.name)
    assert entry.size == 5


def test_builder_exact_block_adds_empty_tail():
    data = bytes(BLOCK_SIZE)
    entry = BlockMapBuilder().add("f.bin", io.BytesIO(data))
    assert len(entry.blocks) == 2
    assert entry.blocks[0].hash == Block.from_bytes(data).hash
    assert entry.blocks[1].hash == EMPTY_SHA256_B64


def test_builder_splits_large_file():
    data = bytes(range(256)) * 300
    entry = BlockMapBuilder().add("f.bin", io.BytesIO(data))
    assert entry.size == len(data)
    assert len(entry.blocks) == len(data) // BLOCK_SIZE + 1
    assert entry.blocks[0].hash == Block.from_bytes(data[:BLOCK_SIZE]).hash
    assert entry.blocks[-1].hash == Block.from_bytes(data[BLOCK_SIZE:]).hash


def test_builder_keeps_file_order_and_parses():
    builder = BlockMapBuilder()
    builder.add("b.txt", io.BytesIO(b"b"))
    builder.add("a.txt", io.BytesIO(b"a"))
    root = ET.fromstring(builder.finish().to_xml())
    ns = "{" + BLOCKMAP_NAMESPACE + "}"
    assert [f.attrib["Name"] for f in root.findall(ns + "File")] == ["b.txt", "a.txt"]