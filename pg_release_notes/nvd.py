"""Client for the NVD CVE API 2.0."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Optional

from .constants import NVD_API_KEY_ENV, NVD_API_URL, NVD_REQUEST_DELAY, NVD_REQUEST_DELAY_WITH_KEY
from .fetcher import Fetcher

logger = logging.getLogger(__name__)


class NVDClient:
    """Looks up single CVE records, sleeping a fixed delay before every query."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        delay: Optional[float] = None,
        fetcher: Optional[Fetcher] = None,
    ):
        if api_key is None:
            api_key = os.environ.get(NVD_API_KEY_ENV) or None
        if delay is None:
            delay = NVD_REQUEST_DELAY_WITH_KEY if api_key else NVD_REQUEST_DELAY
        self.delay = delay
        headers = {"apiKey": api_key} if api_key else None
        self.fetcher = fetcher or Fetcher(rate_limit_delay=0, headers=headers)
        self.calls = 0

    def lookup(self, cve_id: str) -> Optional[dict[str, Any]]:
        """Query NVD for one CVE id.

        Returns the decoded response ({"totalResults": ..., "vulnerabilities": [...]})
        or None if the request failed.
        """
        logger.debug("Waiting %.1fs before querying NVD for %s", self.delay, cve_id)
        time.sleep(self.delay)
        self.calls += 1
        logger.info("Querying NVD for %s", cve_id)
        return self.fetcher.fetch_json(NVD_API_URL, params={"cveId": cve_id})

    __call__ = lookup
