"""
URL patterns which match source URLs and extract IDs from them.
"""

import re
from typing import Dict, Optional
from urllib.parse import urlsplit


class UrlPattern:
    """
    Pattern over the hostname and path of a URL.

    Both parts are regular expressions which have to match completely. The
    pathname expression must define a named group ``id``, e.g.
    ``/release/(?P<id>\\d+)``.
    """

    def __init__(self, hostname: str, pathname: str):
        self.hostname = hostname
        self.pathname = pathname
        self._hostname_re = re.compile(hostname, re.IGNORECASE)
        self._pathname_re = re.compile(pathname)
        if "id" not in self._pathname_re.groupindex:
            raise ValueError(f"Pathname pattern has no 'id' group: {pathname}")

    def __repr__(self) -> str:
        return f"UrlPattern(hostname={self.hostname!r}, pathname={self.pathname!r})"

    @staticmethod
    def _split(url: str):
        try:
            parts = urlsplit(url.strip())
        except (AttributeError, ValueError):
            return None
        if parts.scheme not in ("http", "https") or not parts.hostname:
            return None
        return parts

    def test_hostname(self, url: str) -> bool:
        """Check whether the URL's hostname matches, ignoring its path."""
        parts = self._split(url)
        return bool(parts and self._hostname_re.fullmatch(parts.hostname))

    def exec(self, url: str) -> Optional[Dict[str, str]]:
        """Match the URL and return the named path groups, or None."""
        parts = self._split(url)
        if not parts or not self._hostname_re.fullmatch(parts.hostname):
            return None
        # Tolerate a single trailing slash
        path = parts.path if parts.path == "/" else parts.path.rstrip("/")
        match = self._pathname_re.fullmatch(path)
        if not match:
            return None
        return {name: value for name, value in match.groupdict().items() if value is not None}

    def test(self, url: str) -> bool:
        return self.exec(url) is not None
