"""Page fetching and parsing utilities."""
from __future__ import annotations

import logging
import os
from typing import Optional

import requests
from bs4 import BeautifulSoup
from bs4.dammit import EncodingDetector

logger = logging.getLogger(__name__)

USER_AGENT = os.getenv("ANALYZER_USER_AGENT", "PageAnalyzerBot/1.0")
REQUEST_TIMEOUT = float(os.getenv("ANALYZER_REQUEST_TIMEOUT", "5") or 5)


class FetchFailed(Exception):
    """Raised when the page under analysis cannot be retrieved."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


def fetch_page(url: str) -> str:
    """Fetch ``url`` and return the decoded document.

    Exactly one request is made. Transport errors and any status other than
    200 raise :class:`FetchFailed`.
    """

    try:
        response = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=REQUEST_TIMEOUT,
            allow_redirects=True,
        )
    except requests.RequestException as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        raise FetchFailed(url, str(exc)) from exc

    if response.status_code != 200:
        logger.info("Fetch of %s returned status %s", url, response.status_code)
        raise FetchFailed(
            url,
            f"status code error: {response.status_code} {response.reason}",
            status_code=response.status_code,
        )

    return decode_document(response)


def build_document(html: str) -> BeautifulSoup:
    """Parse markup into a queryable tree."""
    return BeautifulSoup(html, "html.parser")


def decode_document(response: requests.Response) -> str:
    """Decode a fetched page.

    A charset in the ``Content-Type`` header wins. Without one, requests
    would assume ISO-8859-1, so the encoding declared in the markup is used,
    then UTF-8, then whatever requests detects from the bytes.
    """

    content_type = response.headers.get("Content-Type", "")
    if "charset=" in content_type.lower():
        return response.text

    content = response.content
    declared = EncodingDetector.find_declared_encoding(content, is_html=True)
    if declared:
        try:
            return content.decode(declared, errors="replace")
        except LookupError:
            logger.debug("Unknown declared encoding %r", declared)
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.decode(response.apparent_encoding or "utf-8", errors="replace")
