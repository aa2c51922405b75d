"""Accessibility checks for external links."""
from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence

import requests

from .scrape import REQUEST_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

PROBE_MAX_WORKERS = max(1, int(os.getenv("ANALYZER_PROBE_WORKERS", "10") or 0) or 10)
INACCESSIBLE_STATUS = 399


def probe_link(url: str) -> bool:
    """Return ``True`` when ``url`` answers with a status below 399.

    Transport failures count as inaccessible instead of aborting the
    analysis.
    """

    try:
        with requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=REQUEST_TIMEOUT,
            allow_redirects=True,
            stream=True,
        ) as response:
            status_code = response.status_code
    except requests.RequestException as exc:
        logger.warning("Probe of %s failed, counting as inaccessible: %s", url, exc)
        return False

    if status_code >= INACCESSIBLE_STATUS:
        logger.debug("Link %s is inaccessible (status %s)", url, status_code)
        return False
    return True


def count_inaccessible_links(links: Sequence[str], max_workers: int | None = None) -> int:
    """Probe every link once and return how many are inaccessible."""

    if not links:
        return 0

    workers = max(1, min(max_workers or PROBE_MAX_WORKERS, len(links)))
    start = time.perf_counter()
    logger.info("Probing %d external links with %d workers", len(links), workers)

    inaccessible = 0
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(probe_link, link) for link in links]
        for future in as_completed(futures):
            if not future.result():
                inaccessible += 1

    logger.info(
        "Probed %d external links in %.2fs (%d inaccessible)",
        len(links),
        time.perf_counter() - start,
        inaccessible,
    )
    return inaccessible
