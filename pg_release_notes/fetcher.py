"""HTTP client with retry and rate-limiting."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import requests

from .constants import (
    MAX_RETRIES,
    RATE_LIMIT_DELAY,
    REQUEST_TIMEOUT,
    RETRY_BACKOFF_BASE,
    USER_AGENT,
)

logger = logging.getLogger(__name__)


class Fetcher:
    """HTTP fetcher with retries and rate limiting."""

    def __init__(
        self,
        rate_limit_delay: float = RATE_LIMIT_DELAY,
        headers: Optional[dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.rate_limit_delay = rate_limit_delay
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        if headers:
            self.session.headers.update(headers)
        self._last_request_time: float = 0

    def _rate_limit(self) -> None:
        """Enforce delay between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self.rate_limit_delay:
            time.sleep(self.rate_limit_delay - elapsed)

    def _get(self, url: str, params: Optional[dict[str, Any]] = None) -> Optional[requests.Response]:
        """GET with retries. Returns the successful response, or None on failure."""
        self._rate_limit()

        last_error = None
        for attempt in range(MAX_RETRIES):
            try:
                logger.info("Fetching: %s (attempt %d/%d)", url, attempt + 1, MAX_RETRIES)
                response = self.session.get(url, params=params, timeout=REQUEST_TIMEOUT)
                self._last_request_time = time.time()

                if response.status_code == 200:
                    return response

                if response.status_code >= 400 and response.status_code < 500:
                    # Don't retry client errors
                    logger.error("Client error %d for %s", response.status_code, url)
                    return None

                # Server error - retry
                last_error = f"HTTP {response.status_code}"
                logger.warning("Server error %d for %s, retrying...", response.status_code, url)

            except requests.RequestException as e:
                last_error = str(e)
                logger.warning("Request failed for %s: %s, retrying...", url, e)
                self._last_request_time = time.time()

            if attempt < MAX_RETRIES - 1:
                backoff = RETRY_BACKOFF_BASE ** attempt
                logger.debug("Backoff: %ds", backoff)
                time.sleep(backoff)

        logger.error("All retries failed for %s: %s", url, last_error)
        return None

    def fetch(self, url: str) -> Optional[str]:
        """Fetch a URL. Returns the body as text, or None on failure."""
        response = self._get(url)
        if response is None:
            return None
        return response.text

    def fetch_json(self, url: str, params: Optional[dict[str, Any]] = None) -> Optional[dict[str, Any]]:
        """Fetch a URL and decode its JSON body. Returns None on failure."""
        response = self._get(url, params=params)
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("Invalid JSON from %s: %s", url, e)
            return None
