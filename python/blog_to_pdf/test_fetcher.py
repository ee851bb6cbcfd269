from unittest.mock import MagicMock

import pytest
import requests

from blog_to_pdf.exceptions import FetchError
from blog_to_pdf.fetcher import DEFAULT_USER_AGENT, HttpImageFetcher, OfflineFetcher

URL = "https://example.com/photo.jpg"


def ok_response(content=b"image-bytes"):
    resp = MagicMock()
    resp.content = content
    resp.raise_for_status.return_value = None
    return resp


def error_response(status_code):
    resp = MagicMock()
    resp.status_code = status_code
    resp.raise_for_status.side_effect = requests.HTTPError(
        f"{status_code} Error", response=resp)
    return resp


def test_fetch_returns_content():
    session = MagicMock()
    session.get.return_value = ok_response(b"abc")
    fetcher = HttpImageFetcher(session=session, timeout=5)
    assert fetcher.fetch(URL) == b"abc"
    session.get.assert_called_once_with(URL, timeout=5)
    session.headers.update.assert_called_once_with({"User-Agent": DEFAULT_USER_AGENT})


def test_non_success_status_is_fetch_error():
    session = MagicMock()
    session.get.return_value = error_response(404)
    fetcher = HttpImageFetcher(session=session, attempts=3, backoff_ms=0)
    with pytest.raises(FetchError) as exc_info:
        fetcher.fetch(URL)
    assert exc_info.value.identifier == URL
    # 404 is not transient, so no retry
    assert session.get.call_count == 1


def test_connection_error_is_fetch_error():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("connection refused")
    fetcher = HttpImageFetcher(session=session)
    with pytest.raises(FetchError):
        fetcher.fetch(URL)
    assert session.get.call_count == 1


def test_transient_errors_are_retried():
    session = MagicMock()
    session.get.side_effect = [
        requests.ConnectionError("reset"),
        error_response(503),
        ok_response(b"third time"),
    ]
    fetcher = HttpImageFetcher(session=session, attempts=3, backoff_ms=0)
    assert fetcher.fetch(URL) == b"third time"
    assert session.get.call_count == 3


def test_retries_are_bounded():
    session = MagicMock()
    session.get.side_effect = requests.Timeout("timed out")
    fetcher = HttpImageFetcher(session=session, attempts=2, backoff_ms=0)
    with pytest.raises(FetchError):
        fetcher.fetch(URL)
    assert session.get.call_count == 2


def test_invalid_url_is_fetch_error():
    with pytest.raises(FetchError):
        HttpImageFetcher().fetch("not a url")


def test_attempts_must_be_positive():
    with pytest.raises(ValueError):
        HttpImageFetcher(session=MagicMock(), attempts=0)


def test_offline_fetcher_always_fails():
    with pytest.raises(FetchError) as exc_info:
        OfflineFetcher().fetch(URL)
    assert "offline" in exc_info.value.message


def test_invalid_request_settings_are_fetch_error():
    session = MagicMock()
    session.get.side_effect = ValueError("timeout cannot be set to a value less than or equal to 0")
    fetcher = HttpImageFetcher(session=session, timeout=0)
    with pytest.raises(FetchError):
        fetcher.fetch(URL)


def test_first_retry_waits_backoff_ms():
    fetcher = HttpImageFetcher(session=MagicMock(), attempts=4, backoff_ms=1000)
    waits = [fetcher._retrying.exponential_sleep(n, 0) for n in (1, 2, 3)]
    assert waits == [1000, 2000, 4000]
