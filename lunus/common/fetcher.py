"""
Page Fetcher

Shared HTTP client for brand sites.
Handles headers, polite delays, retries and error reporting.
"""

import logging
import random
import time
from typing import Any, Dict, Optional

import requests
from bs4 import BeautifulSoup

from .constants import DEFAULT_ACCEPT_LANGUAGE, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a page cannot be fetched after all retries."""

    def __init__(self, url: str, attempts: int, last_error: str):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{url} failed after {attempts} attempt(s): {last_error}")


class PageFetcher:
    """
    HTTP client used by the listing crawler and the detail scraper.

    Handles:
    - Korean locale browser headers
    - Delay between requests (fixed minimum plus random jitter)
    - Retries with linear backoff on network errors and 429/5xx
    - HTML, soup and JSON helpers

    Usage:
        with PageFetcher(min_delay=0.6) as fetcher:
            soup = fetcher.get_soup("https://www.alloso.co.kr/product/list?categoryNo=1")
    """

    MAX_RETRIES = 3
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

    def __init__(
        self,
        min_delay: float = 0.6,
        jitter: float = 0.5,
        backoff: float = 1.2,
        timeout: int = 30,
        max_retries: Optional[int] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
    ):
        """
        Initialize the fetcher.

        Args:
            min_delay: Minimum seconds between two requests
            jitter: Extra random delay added on top of min_delay (0..jitter)
            backoff: Retry sleep is backoff * attempt seconds
            timeout: Request timeout in seconds
            max_retries: Attempts per request (default: MAX_RETRIES)
            user_agent: User-Agent header
            accept_language: Accept-Language header
        """
        self.min_delay = min_delay
        self.jitter = jitter
        self.backoff = backoff
        self.timeout = timeout
        self.max_retries = max_retries or self.MAX_RETRIES

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,application/json;q=0.8,*/*;q=0.7",
            "Accept-Language": accept_language,
        })

        self.requests_made = 0
        self.last_request_time = 0.0

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "PageFetcher":
        """Create a fetcher from the `http` block of settings.yaml."""
        http = settings.get("http", {})
        return cls(
            min_delay=http.get("min_delay", 0.6),
            jitter=http.get("jitter", 0.5),
            backoff=http.get("backoff", 1.2),
            timeout=http.get("timeout", 30),
            max_retries=http.get("max_retries"),
            user_agent=http.get("user_agent", DEFAULT_USER_AGENT),
            accept_language=http.get("accept_language", DEFAULT_ACCEPT_LANGUAGE),
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self):
        """Sleep so that requests are at least min_delay (+ jitter) apart."""
        wait = self.min_delay + (random.uniform(0, self.jitter) if self.jitter else 0)
        elapsed = time.time() - self.last_request_time

        if elapsed < wait:
            time.sleep(wait - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """
        GET a URL with retries.

        Args:
            url: Absolute URL
            params: Optional query parameters

        Returns:
            Successful response

        Raises:
            FetchError: On a non-retryable HTTP error or when retries run out
        """
        last_error = ""

        for attempt in range(1, self.max_retries + 1):
            self._rate_limit()

            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                last_error = f"{type(e).__name__}: {e}"
                logger.warning("Request error on %s, retry %d/%d: %s",
                               url, attempt, self.max_retries, last_error)
                if attempt < self.max_retries:
                    time.sleep(self.backoff * attempt)
                continue

            if response.status_code in self.RETRYABLE_STATUS_CODES:
                last_error = f"HTTP {response.status_code}"
                logger.warning("HTTP %d on %s, retry %d/%d",
                               response.status_code, url, attempt, self.max_retries)
                if attempt < self.max_retries:
                    time.sleep(self.backoff * attempt)
                continue

            if response.status_code >= 400:
                raise FetchError(url, attempt, f"HTTP {response.status_code}")

            return response

        raise FetchError(url, self.max_retries, last_error)

    def get_html(self, url: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Fetch a page and return decoded HTML."""
        response = self.get(url, params=params)
        # Korean shops frequently omit the charset; requests then guesses latin-1
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = response.apparent_encoding
        return response.text

    def get_soup(self, url: str, params: Optional[Dict[str, Any]] = None) -> BeautifulSoup:
        """Fetch a page and parse it with lxml."""
        return BeautifulSoup(self.get_html(url, params=params), "lxml")

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Fetch a JSON endpoint."""
        return self.get(url, params=params).json()
