"""Load the blog export and the image cache snapshot."""

import json
import logging
import os
import struct

import yaml

from .exceptions import CacheFormatError, ExportFormatError
from .models import Post

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "content", "date")

# Snapshot layout: little-endian u64 counts/lengths around raw key and value bytes
_U64 = struct.Struct("<Q")


def _post_from_record(item, index):
    if not isinstance(item, dict):
        raise ExportFormatError(f"Post #{index} is not a mapping")
    missing = [name for name in REQUIRED_FIELDS if name not in item]
    if missing:
        raise ExportFormatError(f"Post #{index} is missing field(s): {', '.join(missing)}")
    images = item.get("images") or []
    if not isinstance(images, list):
        raise ExportFormatError(f"Post #{index} has a non-list 'images' field")
    return Post(
        title=str(item["title"]),
        content=str(item["content"]),
        date=str(item["date"]),
        images=tuple(str(i) for i in images),
    )


def load_posts_from_file(path):
    """Load posts from a JSON or YAML export, in file order."""
    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path, "r", encoding="utf-8") as f:
            if ext in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as e:
        raise ExportFormatError(f"Could not read export {path}: {e}") from e
    except (ValueError, yaml.YAMLError) as e:
        raise ExportFormatError(f"Could not parse export {path}: {e}") from e

    if not isinstance(data, list):
        raise ExportFormatError(f"Export {path} must contain a list of posts")

    posts = [_post_from_record(item, i) for i, item in enumerate(data)]
    logger.info(f"Loaded {len(posts)} posts from {path}")
    return posts


class ImageCache:
    """Read-only mapping of image identifier to raw image bytes."""

    def __init__(self, entries=None):
        self._entries = dict(entries or {})

    def lookup(self, identifier):
        """Return the cached bytes for ``identifier``, or None on a miss."""
        return self._entries.get(identifier)

    def __contains__(self, identifier):
        return identifier in self._entries

    def __len__(self):
        return len(self._entries)


def _read_u64(buffer, offset):
    if offset + _U64.size > len(buffer):
        raise CacheFormatError("Image cache snapshot is truncated")
    return _U64.unpack_from(buffer, offset)[0], offset + _U64.size


def _read_blob(buffer, offset):
    length, offset = _read_u64(buffer, offset)
    end = offset + length
    if end > len(buffer):
        raise CacheFormatError("Image cache snapshot is truncated")
    return bytes(buffer[offset:end]), end


def decode_image_map(buffer):
    """Decode snapshot bytes into a dict of identifier -> bytes."""
    count, offset = _read_u64(buffer, 0)
    entries = {}
    for _ in range(count):
        key, offset = _read_blob(buffer, offset)
        value, offset = _read_blob(buffer, offset)
        try:
            entries[key.decode("utf-8")] = value
        except UnicodeDecodeError as e:
            raise CacheFormatError(f"Image cache key is not valid UTF-8: {e}") from e
    if offset != len(buffer):
        raise CacheFormatError(
            f"Image cache snapshot has {len(buffer) - offset} trailing bytes")
    return entries


def encode_image_map(entries):
    """Encode a dict of identifier -> bytes into snapshot bytes."""
    parts = [_U64.pack(len(entries))]
    for key, value in entries.items():
        raw_key = key.encode("utf-8")
        parts.append(_U64.pack(len(raw_key)))
        parts.append(raw_key)
        parts.append(_U64.pack(len(value)))
        parts.append(bytes(value))
    return b"".join(parts)


def load_image_cache(path, required=False):
    """Load the image cache snapshot at ``path``.

    A missing file gives an empty cache unless ``required`` is set.
    """
    if not os.path.exists(path):
        if required:
            raise CacheFormatError(f"Image cache snapshot {path} does not exist")
        logger.warning(f"Image cache snapshot {path} not found; every image will be downloaded")
        return ImageCache()
    try:
        with open(path, "rb") as f:
            buffer = f.read()
    except OSError as e:
        raise CacheFormatError(f"Could not read image cache {path}: {e}") from e
    cache = ImageCache(decode_image_map(buffer))
    logger.info(f"Loaded {len(cache)} cached images from {path}")
    return cache


def save_image_cache(entries, path):
    """Write ``entries`` (identifier -> bytes) as a snapshot file."""
    with open(path, "wb") as f:
        f.write(encode_image_map(entries))
    logger.info(f"Saved {len(entries)} images to {path}")
