"""PDF renderer using reportlab.

Consumes layout commands one by one and writes the finished document in
a single step at the end.
"""

import logging
import os
from dataclasses import dataclass
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import (
    Image as RLImage,
    PageBreak as RLPageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
)

from .exceptions import FontLoadError, OutputError
from .layout import Alignment, Break, ImagePlacement, PageBreak, TextBlock
from .models import PAPER_SIZES

logger = logging.getLogger(__name__)

_ALIGNMENTS = {
    Alignment.LEFT: TA_LEFT,
    Alignment.CENTER: TA_CENTER,
    Alignment.RIGHT: TA_RIGHT,
}

# modes reportlab can take straight from a PNG
_PNG_MODES = ("1", "L", "P", "RGB")


@dataclass(frozen=True)
class FontFamily:
    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"


FONT_VARIANTS = {
    "regular": "Regular",
    "bold": "Bold",
    "italic": "Italic",
    "bold_italic": "BoldItalic",
}


def register_font_family(font_dir, family):
    """Register ``<family>-Regular/Bold/Italic/BoldItalic.ttf`` from ``font_dir``."""
    names = {}
    for key, suffix in FONT_VARIANTS.items():
        path = os.path.join(font_dir, f"{family}-{suffix}.ttf")
        name = f"{family}-{suffix}"
        if not os.path.isfile(path):
            raise FontLoadError(f"Font file {path} not found")
        try:
            pdfmetrics.registerFont(TTFont(name, path))
        except (TTFError, OSError) as e:
            raise FontLoadError(f"Could not load font {path}: {e}") from e
        names[key] = name
    pdfmetrics.registerFontFamily(
        family,
        normal=names["regular"],
        bold=names["bold"],
        italic=names["italic"],
        boldItalic=names["bold_italic"],
    )
    logger.debug(f"Registered font family {family} from {font_dir}")
    return FontFamily(regular=names["regular"], bold=names["bold"])


class ReportLabRenderer:
    """Render layout commands into a PDF with reportlab.platypus."""

    def __init__(self, output_path, paper_size="a4", margin=10 * mm,
                 fonts=None, page_numbers=True, line_height=14.4):
        if paper_size not in PAPER_SIZES:
            raise ValueError(f"Unknown paper size {paper_size!r}")
        self.output_path = output_path
        self.PAGE_WIDTH, self.PAGE_HEIGHT = PAPER_SIZES[paper_size]
        self.margin = margin
        self.fonts = fonts or FontFamily()
        self.page_numbers = page_numbers
        self.line_height = line_height
        # SimpleDocTemplate frames pad 6pt on every side
        self.frame_width = self.PAGE_WIDTH - 2 * margin - 12
        self.frame_height = self.PAGE_HEIGHT - 2 * margin - 12
        self._styles = {}
        self._story = []

    def _style(self, font_size, bold, alignment):
        key = (font_size, bold, alignment)
        if key not in self._styles:
            self._styles[key] = ParagraphStyle(
                name=f"Text{font_size}{'Bold' if bold else ''}{alignment.value.title()}",
                fontName=self.fonts.bold if bold else self.fonts.regular,
                fontSize=font_size,
                leading=font_size * 1.2,
                alignment=_ALIGNMENTS[alignment],
            )
        return self._styles[key]

    def _image_flowable(self, command):
        """Scale to the frame keeping the aspect ratio, one pixel per point at most."""
        raster = command.raster
        aspect = raster.width / raster.height
        width = min(self.frame_width, raster.width)
        height = width / aspect
        max_height = self.frame_height - 1
        if height > max_height:
            height = max_height
            width = height * aspect

        img = raster.image
        if img.mode not in _PNG_MODES:
            img = img.convert("RGB")
        buf = BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        flowable = RLImage(buf, width=width, height=height)
        flowable.hAlign = command.alignment.value.upper()
        return flowable

    def emit(self, command):
        """Append the flowable for one layout command."""
        if isinstance(command, TextBlock):
            style = self._style(command.font_size, command.bold, command.alignment)
            if command.text:
                self._story.append(Paragraph(escape(command.text), style))
            else:
                self._story.append(Spacer(1, style.leading))
        elif isinstance(command, Break):
            self._story.append(Spacer(1, command.lines * self.line_height))
        elif isinstance(command, PageBreak):
            self._story.append(RLPageBreak())
        elif isinstance(command, ImagePlacement):
            self._story.append(self._image_flowable(command))
        else:
            raise TypeError(f"Unsupported layout command: {command!r}")

    def _add_page_number(self, canvas, doc):
        """Page number footer callback."""
        canvas.saveState()
        canvas.setFont(self.fonts.regular, 9)
        text = f"- {canvas.getPageNumber()} -"
        canvas.drawCentredString(self.PAGE_WIDTH / 2, self.margin / 2, text)
        canvas.restoreState()

    def save(self):
        """Build the PDF into a temporary file, then move it into place."""
        tmp_path = self.output_path + ".tmp"
        doc = SimpleDocTemplate(
            tmp_path,
            pagesize=(self.PAGE_WIDTH, self.PAGE_HEIGHT),
            leftMargin=self.margin,
            rightMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
        )
        story = self._story or [Spacer(1, 0)]
        on_page = self._add_page_number if self.page_numbers else (lambda canvas, doc: None)
        try:
            doc.build(story, onFirstPage=on_page, onLaterPages=on_page)
            os.replace(tmp_path, self.output_path)
        except Exception as e:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise OutputError(f"Could not write {self.output_path}: {e}") from e
        logger.info(f"PDF saved to {self.output_path}")
