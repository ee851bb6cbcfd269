"""Settings for a blog-to-PDF run.

Values come from the defaults below, then an optional YAML file, then
command-line flags.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Optional, Tuple

import yaml

from .exceptions import ConfigError
from .fetcher import DEFAULT_USER_AGENT
from .models import PAPER_SIZES
from .ordering import DEFAULT_DATE_FORMATS, UNDATED_POSITIONS

_BOOL_FIELDS = ("require_cache", "offline", "page_numbers", "page_break_between_posts", "date_bold")
_SIZE_FIELDS = ("title_size", "date_size", "body_size")


def _is_number(value, types=(int, float)):
    return isinstance(value, types) and not isinstance(value, bool)


@dataclass(frozen=True)
class Config:
    export_path: str = "backup.json"
    cache_path: str = "images.bin"
    output_path: str = "blog.pdf"
    # a missing snapshot is an error instead of an empty cache
    require_cache: bool = False
    offline: bool = False
    fetch_timeout: float = 30
    fetch_attempts: int = 1
    fetch_backoff_ms: int = 1000
    user_agent: str = DEFAULT_USER_AGENT
    date_formats: Tuple[str, ...] = field(default=DEFAULT_DATE_FORMATS)
    undated: str = "first"
    font_dir: Optional[str] = None
    font_family: str = "OpenSans"
    paper_size: str = "a4"
    margin_mm: float = 10
    page_numbers: bool = True
    book_title: Optional[str] = None
    page_break_between_posts: bool = False
    title_size: int = 24
    date_size: int = 12
    date_bold: bool = True
    body_size: int = 12

    def __post_init__(self):
        for name in _BOOL_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false")
        for name in _SIZE_FIELDS:
            if not _is_number(getattr(self, name), int) or getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be a positive integer")
        for name in ("fetch_timeout", "margin_mm"):
            if not _is_number(getattr(self, name)) or getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be a positive number")
        if not _is_number(self.fetch_backoff_ms) or self.fetch_backoff_ms < 0:
            raise ConfigError("fetch_backoff_ms must not be negative")
        if not _is_number(self.fetch_attempts, int):
            raise ConfigError("fetch_attempts must be an integer")
        if self.undated not in UNDATED_POSITIONS:
            raise ConfigError(f"undated must be one of {', '.join(UNDATED_POSITIONS)}")
        if self.paper_size not in PAPER_SIZES:
            raise ConfigError(f"paper_size must be one of {', '.join(sorted(PAPER_SIZES))}")
        if self.fetch_attempts < 1:
            raise ConfigError("fetch_attempts must be at least 1")
        if not self.date_formats:
            raise ConfigError("date_formats must not be empty")

    def updated(self, **overrides):
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        if "date_formats" in changes:
            changes["date_formats"] = tuple(changes["date_formats"])
        try:
            return replace(self, **changes)
        except TypeError as e:
            raise ConfigError(f"Invalid setting value: {e}") from e


def load_config(path, base=None):
    """Read settings from a YAML mapping on top of ``base`` (or the defaults)."""
    base = base or Config()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")
    if isinstance(data.get("date_formats"), str):
        data["date_formats"] = [data["date_formats"]]
    return base.updated(**data)
