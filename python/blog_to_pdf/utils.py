"""Shared utilities: logging setup and output path checks."""

import logging
import os

from .exceptions import OutputError

logger = logging.getLogger("blog_to_pdf")


def setup_logging(debug=False):
    """Attach a stream handler to the package logger."""
    loghandler = logging.StreamHandler()
    if debug:
        loghandler.setFormatter(logging.Formatter('blog_to_pdf: %(levelname)s: %(message)s'))
        logger.setLevel(logging.DEBUG)
    else:
        loghandler.setFormatter(logging.Formatter('%(message)s'))
        logger.setLevel(logging.INFO)
    logger.handlers[:] = [loghandler]
    return logger


def check_output_writable(path):
    """Fail early if ``path`` cannot be created or replaced."""
    directory = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(directory):
        raise OutputError(f"Output directory {directory} does not exist")
    if os.path.isdir(path):
        raise OutputError(f"Output path {path} is a directory")
    if not os.access(directory, os.W_OK):
        raise OutputError(f"Output directory {directory} is not writable")
    if os.path.exists(path) and not os.access(path, os.W_OK):
        raise OutputError(f"Output file {path} is not writable")
