"""Import catalog rows from the first table of a web page."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from funcaudit.core.exceptions import ParseError
from funcaudit.ingestion.file_parser import parse_html_table

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


def fetch_html_table(
    url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> list[dict[str, Any]]:
    """GET ``url`` and return the records of its first ``<table>``.

    Network failures and non-2xx responses raise ParseError naming the URL.
    """
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        response = http.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ParseError(f"page returned HTTP {exc.response.status_code}", url) from exc
    except httpx.HTTPError as exc:
        raise ParseError(f"could not fetch page: {exc}", url) from exc
    finally:
        if owns_client:
            http.close()

    records = parse_html_table(response.text)
    logger.info("Fetched %d table rows from %s", len(records), url)
    return records
