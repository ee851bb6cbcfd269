import json
from io import BytesIO

import pytest
from PIL import Image

from blog_to_pdf.exceptions import FetchError
from blog_to_pdf.progress import ProgressObserver


def make_image_bytes(mode="RGB", size=(8, 6), fmt="PNG", **save_kwargs):
    color = {"RGB": (200, 30, 30), "RGBA": (200, 30, 30, 128), "L": 128,
             "LA": (128, 100), "P": 1, "CMYK": (0, 50, 50, 0)}[mode]
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


class FakeFetcher:
    """Serves bytes from a dict and records every identifier asked for."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    def fetch(self, identifier):
        self.calls.append(identifier)
        if identifier not in self.responses:
            raise FetchError(identifier, f"{identifier}: 404 Not Found")
        return self.responses[identifier]


class RecordingProgress(ProgressObserver):
    def __init__(self):
        self.events = []

    def set_total(self, total):
        self.events.append(("total", total))

    def increment(self):
        self.events.append(("increment",))

    def set_status(self, text):
        self.events.append(("status", text))

    def image_skipped(self, result):
        self.events.append(("skipped", result.identifier, result.status))

    def finish(self, text):
        self.events.append(("finish", text))


@pytest.fixture
def rgb_png():
    return make_image_bytes("RGB")


@pytest.fixture
def rgba_png():
    return make_image_bytes("RGBA")


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def progress():
    return RecordingProgress()


@pytest.fixture
def write_export(tmp_path):
    def _write(records, name="backup.json"):
        path = tmp_path / name
        path.write_text(json.dumps(records), encoding="utf-8")
        return str(path)
    return _write
