"""Download images that are not in the cache."""

import logging

import requests
from retrying import Retrying

from .exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; blog-to-pdf/1.0)"
RETRY_STATUS_CODES = {429, 500, 502, 503, 504}


class ImageFetcher:
    """Interface for anything that turns an identifier into image bytes."""

    def fetch(self, identifier):
        """Return the raw bytes for ``identifier`` or raise FetchError."""
        raise NotImplementedError


class OfflineFetcher(ImageFetcher):
    """Fetcher used when network access is disabled."""

    def fetch(self, identifier):
        raise FetchError(identifier, f"{identifier}: offline mode, image not in cache")


def _is_transient(exc):
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return exc.response.status_code in RETRY_STATUS_CODES
    return False


class HttpImageFetcher(ImageFetcher):
    """Blocking HTTP fetcher with optional bounded retry.

    ``attempts`` is the total number of tries, so 1 means no retry.
    The first retry waits ``backoff_ms`` and each later wait doubles.
    """

    def __init__(self, session=None, timeout=30, attempts=1, backoff_ms=1000,
                 user_agent=DEFAULT_USER_AGENT):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})
        self.timeout = timeout
        self.attempts = attempts
        self._retrying = Retrying(
            stop_max_attempt_number=attempts,
            wait_exponential_multiplier=backoff_ms / 2,
            wait_exponential_max=max(backoff_ms, 1) * 30,
            retry_on_exception=self._should_retry,
        )

    def _should_retry(self, exc):
        retry = _is_transient(exc)
        if retry and self.attempts > 1:
            logger.debug(f"Retrying after transient error: {exc}")
        return retry

    def _get(self, url):
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.content

    def fetch(self, identifier):
        try:
            data = self._retrying.call(self._get, identifier)
        except (requests.RequestException, ValueError) as e:
            raise FetchError(identifier, f"{identifier}: {e}") from e
        logger.debug(f"Downloaded image: {identifier} ({len(data)} bytes)")
        return data
