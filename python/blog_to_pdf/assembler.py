"""Turn ordered posts into a stream of layout commands."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List

from .images import ImageStatus
from .layout import Alignment, Break, ImagePlacement, PageBreak, TextBlock
from .models import Dated
from .ordering import DEFAULT_DATE_FORMATS, parse_post_date
from .progress import ProgressObserver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostStyle:
    title_size: int = 24
    date_size: int = 12
    date_bold: bool = True
    body_size: int = 12
    spacer_lines: int = 1
    book_title_size: int = 28
    book_subtitle_size: int = 14


@dataclass
class PostReport:
    """What happened to one post's images."""
    title: str
    images: List = field(default_factory=list)


def unescape_text(text):
    """Replace the ``&amp;`` entity with ``&``. Nothing else is decoded."""
    return text.replace("&amp;", "&")


def split_lines(text):
    """Split on newlines, dropping a trailing carriage return from each line.

    A final newline does not start an extra empty line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class DocumentAssembler:
    """Emit title, date, body and images for each post, in order.

    Images are resolved one at a time through ``resolver``; any image that
    cannot be used is skipped and the rest of the post is still emitted.
    """

    def __init__(self, resolver, sink, progress=None, style=None,
                 page_break_between_posts=False, book_title=None,
                 date_formats=DEFAULT_DATE_FORMATS):
        self.resolver = resolver
        self.sink = sink
        self.progress = progress or ProgressObserver()
        self.style = style or PostStyle()
        self.page_break_between_posts = page_break_between_posts
        self.book_title = book_title
        self.date_formats = date_formats

    def _date_range(self, posts):
        dates = [d.value for d in (parse_post_date(p.date, self.date_formats) for p in posts)
                 if isinstance(d, Dated)]
        if not dates:
            return None
        return f"{min(dates).strftime('%B %Y')} – {max(dates).strftime('%B %Y')}"

    def emit_title_page(self, posts):
        style = self.style
        self.sink.emit(TextBlock(unescape_text(self.book_title), style.book_title_size,
                                 bold=True, alignment=Alignment.CENTER))
        self.sink.emit(Break(style.spacer_lines))
        date_range = self._date_range(posts)
        if date_range:
            self.sink.emit(TextBlock(date_range, style.book_subtitle_size,
                                     alignment=Alignment.CENTER))
        self.sink.emit(TextBlock(f"{len(posts)} posts", style.book_subtitle_size,
                                 alignment=Alignment.CENTER))
        self.sink.emit(PageBreak())

    def _emit_text(self, post):
        style = self.style
        self.sink.emit(TextBlock(unescape_text(post.title), style.title_size, bold=True))
        self.sink.emit(TextBlock(post.date, style.date_size, bold=style.date_bold))
        self.sink.emit(Break(style.spacer_lines))
        for line in split_lines(post.content):
            self.sink.emit(TextBlock(unescape_text(line), style.body_size))

    def _emit_images(self, post):
        results = []

        def on_fetch():
            self.progress.set_status(f"Downloading image for: {post.title}")

        for identifier in post.images:
            result = self.resolver.resolve(identifier, on_fetch=on_fetch)
            if result.embedded:
                self.sink.emit(ImagePlacement.from_raster(identifier, result.raster))
            else:
                self.progress.image_skipped(result)
            results.append(result)
        return results

    def emit_post(self, post):
        """Emit every command for ``post`` and return its report."""
        self.progress.set_status(f"Processing post: {post.title}")
        self._emit_text(post)
        report = PostReport(title=post.title, images=self._emit_images(post))
        self.progress.increment()
        return report

    def assemble(self, posts):
        """Emit the whole document for ``posts`` (already ordered)."""
        self.progress.set_total(len(posts))
        if self.book_title:
            self.emit_title_page(posts)

        reports = []
        for i, post in enumerate(posts):
            if self.page_break_between_posts and i > 0:
                self.sink.emit(PageBreak())
            reports.append(self.emit_post(post))

        self.progress.finish("PDF generation complete!")
        self._log_summary(reports)
        return reports

    def _log_summary(self, reports):
        counts = Counter(r.status for report in reports for r in report.images)
        skipped = sum(n for status, n in counts.items() if status is not ImageStatus.EMBEDDED)
        logger.info(
            f"Assembled {len(reports)} posts: {counts[ImageStatus.EMBEDDED]} images embedded, "
            f"{skipped} skipped (alpha: {counts[ImageStatus.SKIPPED_ALPHA]}, "
            f"download: {counts[ImageStatus.SKIPPED_FETCH_ERROR]}, "
            f"decode: {counts[ImageStatus.SKIPPED_DECODE_ERROR]})")
