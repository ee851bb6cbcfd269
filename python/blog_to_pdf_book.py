#!/usr/bin/env python3
"""
Blog-to-PDF Book Generator

Turn a blog export (a JSON or YAML list of posts with title, date, content
and image URLs) into a single PDF, oldest post first. Images are taken from
a local cache snapshot when present and downloaded otherwise.

Usage:
    # Defaults: backup.json + images.bin -> blog.pdf
    python blog_to_pdf_book.py

    # Custom paths, bundled fonts and a title page
    python blog_to_pdf_book.py --export posts.yaml --images images.bin \\
        --output book.pdf --fonts ./fonts --font-family OpenSans \\
        --title "My Blog"

    # Cache only, no network access
    python blog_to_pdf_book.py --offline --require-cache

Requires:
    - requests, reportlab, Pillow, PyYAML, retrying, tqdm
"""

import argparse
import logging

from tqdm.contrib.logging import logging_redirect_tqdm

from blog_to_pdf.config import Config, load_config
from blog_to_pdf.exceptions import BlogToPdfError
from blog_to_pdf.models import PAPER_SIZES
from blog_to_pdf.ordering import UNDATED_POSITIONS
from blog_to_pdf.pipeline import build_book
from blog_to_pdf.progress import TqdmProgress
from blog_to_pdf.utils import setup_logging

logger = logging.getLogger("blog_to_pdf")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a PDF book from a blog export.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        help="YAML file with settings; flags given here override it.",
    )
    parser.add_argument(
        "--export", dest="export_path",
        help="Blog export file, .json or .yaml (default: backup.json).",
    )
    parser.add_argument(
        "--images", dest="cache_path",
        help="Image cache snapshot (default: images.bin).",
    )
    parser.add_argument(
        "--output", dest="output_path",
        help="Output PDF file path (default: blog.pdf).",
    )
    parser.add_argument(
        "--fonts", dest="font_dir",
        help="Directory with <family>-Regular/Bold/Italic/BoldItalic.ttf files.",
    )
    parser.add_argument(
        "--font-family",
        help="Font family name to load from --fonts (default: OpenSans).",
    )
    parser.add_argument(
        "--paper-size", choices=sorted(PAPER_SIZES),
        help="Paper size (default: a4).",
    )
    parser.add_argument(
        "--title", dest="book_title",
        help="Add a title page with this book title.",
    )
    parser.add_argument(
        "--offline", action="store_true", default=None,
        help="Never download images; use the cache only.",
    )
    parser.add_argument(
        "--require-cache", action="store_true", default=None,
        help="Fail if the image cache snapshot is missing.",
    )
    parser.add_argument(
        "--retries", type=int,
        help="Extra download attempts for transient network errors (default: 0).",
    )
    parser.add_argument(
        "--timeout", type=float, dest="fetch_timeout",
        help="Per-request download timeout in seconds (default: 30).",
    )
    parser.add_argument(
        "--undated", choices=UNDATED_POSITIONS,
        help="Place posts with unparseable dates first or last (default: first).",
    )
    parser.add_argument(
        "--page-break", dest="page_break_between_posts", action="store_true", default=None,
        help="Start every post on a new page.",
    )
    parser.add_argument(
        "--no-page-numbers", dest="page_numbers", action="store_false", default=None,
        help="Do not print page numbers.",
    )
    parser.add_argument(
        "--debug", action="store_true", default=False,
        help="Turn on debug logging.",
    )
    return parser.parse_args(argv)


def config_from_args(args):
    config = load_config(args.config) if args.config else Config()
    fetch_attempts = args.retries + 1 if args.retries is not None else None
    return config.updated(
        export_path=args.export_path,
        cache_path=args.cache_path,
        output_path=args.output_path,
        font_dir=args.font_dir,
        font_family=args.font_family,
        paper_size=args.paper_size,
        book_title=args.book_title,
        offline=args.offline,
        require_cache=args.require_cache,
        fetch_attempts=fetch_attempts,
        fetch_timeout=args.fetch_timeout,
        undated=args.undated,
        page_break_between_posts=args.page_break_between_posts,
        page_numbers=args.page_numbers,
    )


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.debug)
    try:
        config = config_from_args(args)
        with logging_redirect_tqdm(loggers=[logger]):
            build_book(config, progress=TqdmProgress())
    except BlogToPdfError as e:
        logger.error(f"Error: {e.message}")
        raise SystemExit(1)
    logger.info("All done!")


if __name__ == "__main__":
    main()
