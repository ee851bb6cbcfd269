"""Blog-to-PDF Book Generator library.

Orders the posts of a blog export by date, resolves their images from a
local cache or the network, and lays everything out into a single PDF.
"""

from .models import Post, Dated, Undated, PAPER_SIZES
from .exceptions import (
    BlogToPdfError,
    ConfigError,
    ExportFormatError,
    CacheFormatError,
    FontLoadError,
    OutputError,
    ImageError,
    FetchError,
    DecodeError,
)
from .ordering import parse_post_date, sort_posts
from .storage import ImageCache, load_posts_from_file, load_image_cache, save_image_cache
from .fetcher import ImageFetcher, HttpImageFetcher, OfflineFetcher
from .images import Raster, ImageStatus, ImageResult, ImageResolver, decode_and_filter
from .layout import Alignment, TextBlock, Break, PageBreak, ImagePlacement, CommandRecorder
from .assembler import DocumentAssembler, PostStyle, PostReport
from .renderer import ReportLabRenderer, FontFamily, register_font_family
from .progress import ProgressObserver, TqdmProgress
from .config import Config, load_config
from .pipeline import build_book
from .utils import setup_logging

__all__ = [
    "Post",
    "Dated",
    "Undated",
    "PAPER_SIZES",
    "BlogToPdfError",
    "ConfigError",
    "ExportFormatError",
    "CacheFormatError",
    "FontLoadError",
    "OutputError",
    "ImageError",
    "FetchError",
    "DecodeError",
    "parse_post_date",
    "sort_posts",
    "ImageCache",
    "load_posts_from_file",
    "load_image_cache",
    "save_image_cache",
    "ImageFetcher",
    "HttpImageFetcher",
    "OfflineFetcher",
    "Raster",
    "ImageStatus",
    "ImageResult",
    "ImageResolver",
    "decode_and_filter",
    "Alignment",
    "TextBlock",
    "Break",
    "PageBreak",
    "ImagePlacement",
    "CommandRecorder",
    "DocumentAssembler",
    "PostStyle",
    "PostReport",
    "ReportLabRenderer",
    "FontFamily",
    "register_font_family",
    "ProgressObserver",
    "TqdmProgress",
    "Config",
    "load_config",
    "build_book",
    "setup_logging",
]
