"""Signal extractors operating on raw markup or a parsed document."""
from __future__ import annotations

import logging
from typing import Dict, List

from bs4 import BeautifulSoup

from .schemas import HEADING_LEVELS, LinkSummary

logger = logging.getLogger(__name__)

TITLE_OPEN = "<title>"
TITLE_CLOSE = "</title>"
TITLE_NOT_FOUND = "No title found"
TITLE_INCOMPLETE = "Title tag not closed"

NO_VERSION_FOUND = "No version found"

# Checked in order; the first signature found in the lower-cased page wins.
DOCTYPE_SIGNATURES: tuple[tuple[str, str], ...] = (
    ("html5", "<!doctype html>"),
    ("HTML4.01-Strict", '<!doctype html public "-//w3c//dtd html 4.01//en"'),
    ("HTML4.01-Transitional", '<!doctype html public "-//w3c//dtd html 4.01 transitional//en"'),
    ("HTML4.01-Frameset", '<!doctype html public "-//w3c//dtd html 4.01 frameset//en"'),
)

EXTERNAL_SCHEMES = ("http://", "https://")
LOGIN_TITLE_KEYWORDS = ("sign in", "login")
PASSWORD_FIELD_KEYWORD = "password"


def extract_title(html: str) -> str:
    """Return the text between the first ``<title>`` and the ``</title>`` after it.

    This is a literal marker search rather than a tag parse, so
    ``<title id="x">`` is not recognised. Sentinels are returned instead of
    raising when either marker is missing.
    """

    start = html.find(TITLE_OPEN)
    if start == -1:
        logger.debug("No title element found")
        return TITLE_NOT_FOUND
    start += len(TITLE_OPEN)

    end = html.find(TITLE_CLOSE, start)
    if end == -1:
        logger.debug("No closing tag for title found")
        return TITLE_INCOMPLETE
    return html[start:end]


def classify_doctype(html: str) -> str:
    lowered = html.lower()
    for label, signature in DOCTYPE_SIGNATURES:
        if signature in lowered:
            return label
    return NO_VERSION_FOUND


def count_headings(soup: BeautifulSoup) -> Dict[str, int]:
    """Count exact tag matches for every heading level, zeros included."""
    counts: Dict[str, int] = {}
    for level in HEADING_LEVELS:
        counts[level] = len(soup.find_all(level))
    return counts


def is_external_link(href: str) -> bool:
    """Any href mentioning an absolute http(s) URL counts as external, redirects included."""
    return any(scheme in href for scheme in EXTERNAL_SCHEMES)


def classify_links(soup: BeautifulSoup) -> LinkSummary:
    """Partition anchors carrying an ``href`` into external and internal targets.

    External hrefs are returned in document order for probing.
    """

    external_links: List[str] = []
    internal_count = 0
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if is_external_link(href):
            external_links.append(href.strip())
        else:
            internal_count += 1

    return LinkSummary(
        external_count=len(external_links),
        internal_count=internal_count,
        external_links=external_links,
    )


def is_login_page(title: str, soup: BeautifulSoup) -> bool:
    """Heuristically decide whether the page is a login form.

    The title is checked first; only when it has no login keyword are the
    ``name`` attributes of input fields scanned for a password field.
    """

    lowered_title = title.lower()
    if any(keyword in lowered_title for keyword in LOGIN_TITLE_KEYWORDS):
        return True

    for field in soup.find_all("input", attrs={"name": True}):
        name = field.get("name") or ""
        if PASSWORD_FIELD_KEYWORD in name.lower():
            return True
    return False
