"""Exceptions raised while turning a blog export into a PDF.

Fatal errors stop the run. ``ImageError`` subclasses only ever affect a
single image and are handled by skipping that image.
"""


class BlogToPdfError(Exception):
    """Base exception for all blog_to_pdf errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown blog_to_pdf error occurred."


class ConfigError(BlogToPdfError):
    """Raised when a configuration file or setting is invalid."""

    @property
    def default_message(self) -> str:
        return "Invalid configuration."


class ExportFormatError(BlogToPdfError):
    """Raised when the blog export is missing or malformed."""

    @property
    def default_message(self) -> str:
        return "Blog export is missing or malformed."


class CacheFormatError(BlogToPdfError):
    """Raised when the image cache snapshot cannot be read."""

    @property
    def default_message(self) -> str:
        return "Image cache snapshot is missing or corrupt."


class FontLoadError(BlogToPdfError):
    """Raised when a font file is missing or cannot be parsed."""

    @property
    def default_message(self) -> str:
        return "Font family could not be loaded."


class OutputError(BlogToPdfError):
    """Raised when the output document cannot be written."""

    @property
    def default_message(self) -> str:
        return "Output document could not be written."


class ImageError(BlogToPdfError):
    """Base class for per-image failures. Never fatal."""

    def __init__(self, identifier: str, message: str = "") -> None:
        super().__init__(message)
        self.identifier = identifier

    @property
    def default_message(self) -> str:
        return "Image could not be used."


class FetchError(ImageError):
    """Raised when an image cannot be downloaded."""

    @property
    def default_message(self) -> str:
        return "Image could not be downloaded."


class DecodeError(ImageError):
    """Raised when image bytes cannot be decoded."""

    @property
    def default_message(self) -> str:
        return "Image data could not be decoded."
