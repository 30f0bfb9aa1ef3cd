"""Default HTTP fetching collaborator for external feeds."""

from __future__ import annotations

import logging

import httpx

from crssnt.exceptions import SourceUnavailable

logger = logging.getLogger(__name__)

USER_AGENT = "crssnt/0.1 (+https://crssnt.com)"


def fetch_feed_text(url: str, timeout: float = 30) -> str:
    """GET *url* and return the response body as text.

    Raises SourceUnavailable on any transport error or non-2xx status.
    """
    try:
        response = httpx.get(
            url,
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("HTTP error fetching %s: %s", url, exc)
        raise SourceUnavailable(url, str(exc)) from exc
    return response.text
