"""Page analysis pipeline."""
from __future__ import annotations

import logging
import time

from .extractors import classify_doctype, classify_links, count_headings, extract_title, is_login_page
from .probe import count_inaccessible_links
from .schemas import AnalysisResult
from .scrape import build_document, fetch_page

logger = logging.getLogger(__name__)


def analyze(url: str) -> AnalysisResult:
    """Fetch ``url`` and derive its page signals.

    :class:`~page_analyzer.scrape.FetchFailed` propagates to the caller and no
    result is produced. Missing titles or doctypes are reported through
    sentinel values rather than errors.
    """

    start = time.perf_counter()
    logger.info("Analysing %s", url)

    html = fetch_page(url)
    soup = build_document(html)

    page_title = extract_title(html)
    html_version = classify_doctype(html)
    heading_counts = count_headings(soup)
    links = classify_links(soup)
    inaccessible = count_inaccessible_links(links.external_links)
    is_login = is_login_page(page_title, soup)

    result = AnalysisResult(
        url=url,
        page_title=page_title,
        html_version=html_version,
        heading_counts=heading_counts,
        external_link_count=links.external_count,
        internal_link_count=links.internal_count,
        inaccessible_link_count=inaccessible,
        is_login=is_login,
    )
    logger.info(
        "Analysis of %s completed in %.2fs (%d external, %d internal, %d inaccessible links)",
        url,
        time.perf_counter() - start,
        result.external_link_count,
        result.internal_link_count,
        result.inaccessible_link_count,
    )
    return result
