"""Decode image bytes and resolve identifiers through the cache/fetch chain."""

import enum
import hashlib
import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .exceptions import DecodeError, FetchError

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_NETWORK = "network"


@dataclass(frozen=True)
class Raster:
    """A fully decoded image without transparency."""
    image: Image.Image = field(compare=False, repr=False)
    width: int
    height: int
    mode: str
    format: Optional[str]
    digest: str


class ImageStatus(enum.Enum):
    EMBEDDED = "embedded"
    SKIPPED_ALPHA = "skipped-alpha"
    SKIPPED_FETCH_ERROR = "skipped-fetch-error"
    SKIPPED_DECODE_ERROR = "skipped-decode-error"


@dataclass(frozen=True)
class ImageResult:
    """Outcome of resolving one image identifier."""
    identifier: str
    status: ImageStatus
    source: Optional[str] = None
    raster: Optional[Raster] = None
    error: Optional[str] = None

    @property
    def embedded(self):
        return self.status is ImageStatus.EMBEDDED


def decode_image(data, identifier=""):
    """Decode raw bytes with Pillow, detecting the format from the content."""
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, EOFError, ValueError, SyntaxError,
            Image.DecompressionBombError) as e:
        raise DecodeError(identifier, f"Could not decode image {identifier}: {e}") from e
    return img


def _pixel_digest(img):
    h = hashlib.sha1(img.mode.encode("ascii"))
    h.update(img.tobytes())
    palette = img.getpalette()
    if palette:
        h.update(bytes(palette))
    return h.hexdigest()


def decode_and_filter(data, identifier=""):
    """Decode ``data`` and return a ``Raster``, or None if it has transparency.

    Raises DecodeError for bytes Pillow cannot read.
    """
    img = decode_image(data, identifier)
    # covers alpha modes (RGBA, LA, PA) and palette/RGB transparency keys
    if img.has_transparency_data:
        return None
    return Raster(
        image=img,
        width=img.width,
        height=img.height,
        mode=img.mode,
        format=img.format,
        digest=_pixel_digest(img),
    )


class ImageResolver:
    """Resolve image identifiers cache-first, falling back to the fetcher."""

    def __init__(self, cache, fetcher, decoder=decode_and_filter):
        self.cache = cache
        self.fetcher = fetcher
        self.decoder = decoder

    def _load_bytes(self, identifier, on_fetch):
        data = self.cache.lookup(identifier)
        if data is not None:
            logger.debug(f"Cache hit: {identifier}")
            return data, SOURCE_CACHE
        logger.debug(f"Cache miss, downloading: {identifier}")
        if on_fetch is not None:
            on_fetch()
        return self.fetcher.fetch(identifier), SOURCE_NETWORK

    def resolve(self, identifier, on_fetch=None):
        """Return an ``ImageResult`` for ``identifier``. Never raises ImageError."""
        try:
            data, source = self._load_bytes(identifier, on_fetch)
        except FetchError as e:
            logger.warning(f"Failed to download image: {e}")
            return ImageResult(identifier, ImageStatus.SKIPPED_FETCH_ERROR,
                               source=SOURCE_NETWORK, error=str(e))

        try:
            raster = self.decoder(data, identifier)
        except DecodeError as e:
            logger.warning(str(e))
            return ImageResult(identifier, ImageStatus.SKIPPED_DECODE_ERROR,
                               source=source, error=str(e))

        if raster is None:
            logger.info(f"Skipping image with alpha channel: {identifier}")
            return ImageResult(identifier, ImageStatus.SKIPPED_ALPHA, source=source)
        return ImageResult(identifier, ImageStatus.EMBEDDED, source=source, raster=raster)
