"""Data models and constants for blog-to-PDF generation."""

from dataclasses import dataclass, field
from datetime import date
from typing import Tuple, Union

from reportlab.lib.pagesizes import letter, A4, legal, A3, A5, TABLOID

PAPER_SIZES = {
    "letter": letter,
    "a4": A4,
    "legal": legal,
    "a3": A3,
    "a5": A5,
    "tabloid": TABLOID,
}


@dataclass(frozen=True)
class Post:
    """A single entry from the blog export."""
    title: str
    content: str
    date: str
    # image identifiers, in the order the post lists them; each one is both
    # a cache key and a download URL
    images: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Dated:
    """A post date that parsed successfully."""
    value: date


@dataclass(frozen=True)
class Undated:
    """A post date that did not match any accepted format."""
    raw: str


PostDate = Union[Dated, Undated]
