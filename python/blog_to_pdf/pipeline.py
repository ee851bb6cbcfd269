"""End-to-end conversion: export + cache in, one PDF out."""

import logging

from reportlab.lib.units import mm

from .assembler import DocumentAssembler, PostStyle
from .fetcher import HttpImageFetcher, OfflineFetcher
from .images import ImageResolver
from .ordering import sort_posts
from .renderer import FontFamily, ReportLabRenderer, register_font_family
from .storage import load_image_cache, load_posts_from_file
from .utils import check_output_writable

logger = logging.getLogger(__name__)


def make_fetcher(config):
    if config.offline:
        return OfflineFetcher()
    return HttpImageFetcher(
        timeout=config.fetch_timeout,
        attempts=config.fetch_attempts,
        backoff_ms=config.fetch_backoff_ms,
        user_agent=config.user_agent,
    )


def make_renderer(config):
    fonts = FontFamily()
    if config.font_dir:
        fonts = register_font_family(config.font_dir, config.font_family)
    return ReportLabRenderer(
        config.output_path,
        paper_size=config.paper_size,
        margin=config.margin_mm * mm,
        fonts=fonts,
        page_numbers=config.page_numbers,
        line_height=config.body_size * 1.2,
    )


def make_style(config):
    return PostStyle(
        title_size=config.title_size,
        date_size=config.date_size,
        date_bold=config.date_bold,
        body_size=config.body_size,
    )


def build_book(config, progress=None, fetcher=None):
    """Run the whole conversion described by ``config``.

    Every fatal problem (export, cache, fonts, output) is raised before the
    first post is laid out. Returns the per-post reports. An export with no
    posts still produces an (empty) document.
    """
    posts = load_posts_from_file(config.export_path)
    if not posts:
        logger.info("No posts to render.")
    posts = sort_posts(posts, config.date_formats, config.undated)

    cache = load_image_cache(config.cache_path, required=config.require_cache)
    check_output_writable(config.output_path)
    renderer = make_renderer(config)

    resolver = ImageResolver(cache, fetcher or make_fetcher(config))
    assembler = DocumentAssembler(
        resolver,
        renderer,
        progress=progress,
        style=make_style(config),
        page_break_between_posts=config.page_break_between_posts,
        book_title=config.book_title,
        date_formats=config.date_formats,
    )
    reports = assembler.assemble(posts)

    logger.info("Saving PDF, this may take a few minutes...")
    renderer.save()
    return reports
