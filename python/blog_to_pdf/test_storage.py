import struct

import pytest

from blog_to_pdf.exceptions import CacheFormatError, ExportFormatError
from blog_to_pdf.models import Post
from blog_to_pdf.storage import (
    ImageCache,
    decode_image_map,
    encode_image_map,
    load_image_cache,
    load_posts_from_file,
    save_image_cache,
)


RECORD = {
    "title": "Hello &amp; welcome",
    "content": "line one\nline two",
    "date": "Monday 01 January 2024",
    "images": ["https://example.com/a.jpg", "https://example.com/b.png"],
}


def test_load_posts_from_json(write_export):
    path = write_export([RECORD, dict(RECORD, title="Second", images=[])])
    posts = load_posts_from_file(path)
    assert posts == [
        Post(
            title="Hello &amp; welcome",
            content="line one\nline two",
            date="Monday 01 January 2024",
            images=("https://example.com/a.jpg", "https://example.com/b.png"),
        ),
        Post(title="Second", content="line one\nline two",
             date="Monday 01 January 2024", images=()),
    ]


def test_load_posts_from_yaml(tmp_path):
    path = tmp_path / "backup.yaml"
    path.write_text(
        "- title: From YAML\n"
        "  content: |\n"
        "    first\n"
        "    second\n"
        "  date: Monday 01 January 2024\n",
        encoding="utf-8",
    )
    posts = load_posts_from_file(str(path))
    assert len(posts) == 1
    assert posts[0].title == "From YAML"
    assert posts[0].content == "first\nsecond\n"
    assert posts[0].images == ()


@pytest.mark.parametrize("records", [
    {"title": "not a list"},
    ["not a mapping"],
    [{"title": "no content", "date": "N/A"}],
    [dict(RECORD, images="https://example.com/a.jpg")],
])
def test_load_posts_rejects_malformed_exports(write_export, records):
    with pytest.raises(ExportFormatError):
        load_posts_from_file(write_export(records))


def test_load_posts_rejects_bad_json(tmp_path):
    path = tmp_path / "backup.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(ExportFormatError):
        load_posts_from_file(str(path))


def test_load_posts_missing_file(tmp_path):
    with pytest.raises(ExportFormatError):
        load_posts_from_file(str(tmp_path / "missing.json"))


def test_snapshot_layout():
    data = encode_image_map({"k": b"\x01\x02"})
    assert data == (struct.pack("<Q", 1) + struct.pack("<Q", 1) + b"k"
                    + struct.pack("<Q", 2) + b"\x01\x02")
    assert decode_image_map(data) == {"k": b"\x01\x02"}
    assert decode_image_map(struct.pack("<Q", 0)) == {}


@pytest.mark.parametrize("data", [
    b"",
    b"\x01\x00\x00",
    struct.pack("<Q", 1) + struct.pack("<Q", 10) + b"short",
    struct.pack("<Q", 0) + b"extra",
    struct.pack("<QQ", 1, 2) + b"\xff\xfe" + struct.pack("<Q", 0),
])
def test_decode_image_map_rejects_corrupt_data(data):
    with pytest.raises(CacheFormatError):
        decode_image_map(data)


def test_save_and_load_image_cache(tmp_path, rgb_png):
    path = str(tmp_path / "images.bin")
    save_image_cache({"https://example.com/a.png": rgb_png}, path)
    cache = load_image_cache(path)
    assert len(cache) == 1
    assert "https://example.com/a.png" in cache
    assert cache.lookup("https://example.com/a.png") == rgb_png
    assert cache.lookup("https://example.com/other.png") is None


def test_missing_cache_is_empty_unless_required(tmp_path):
    path = str(tmp_path / "images.bin")
    cache = load_image_cache(path)
    assert len(cache) == 0
    assert cache.lookup("anything") is None
    with pytest.raises(CacheFormatError):
        load_image_cache(path, required=True)


def test_image_cache_is_a_copy():
    entries = {"a": b"1"}
    cache = ImageCache(entries)
    entries["b"] = b"2"
    assert cache.lookup("b") is None
