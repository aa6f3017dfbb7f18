"""
Thin wrapper around requests.Session used by every provider.

`get` returns the response on HTTP 200 and None otherwise, so callers can
write `if not resp:`. The status of the last call is kept on
`last_status_code` (None when the request never reached the server) so a
provider can tell a rate limit apart from other failures.
"""

import logging
from typing import Dict, Optional

import requests
from fake_useragent import UserAgent

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
FALLBACK_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _random_user_agent() -> str:
    try:
        return UserAgent().random
    except Exception as e:
        logger.debug(f"fake_useragent unavailable ({e}), using fallback User-Agent")
        return FALLBACK_USER_AGENT


class RequestSession:
    """requests.Session with a browser User-Agent and a default timeout."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, headers: Optional[Dict] = None):
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": _random_user_agent(),
            "Accept": "application/json",
        })
        if headers:
            self.session.headers.update(headers)
        self.last_status_code: Optional[int] = None

    def get(self, url: str, params: Optional[Dict] = None) -> Optional[requests.Response]:
        """
        GET a URL.

        Returns:
            The response if the server answered 200, else None.
        """
        self.last_status_code = None
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"GET {url} failed: {e}")
            return None

        self.last_status_code = resp.status_code
        if resp.status_code != 200:
            logger.warning(f"GET {url} returned HTTP {resp.status_code}")
            return None
        return resp

    def close(self) -> None:
        self.session.close()
