from __future__ import annotations

from typing import Awaitable, Callable, Optional

import httpx

from app.services.errors import FetchError
from app.utils.config import FETCH_TIMEOUT_S
from app.utils.logging import get_logger

logger = get_logger(__name__)

# power.gov.ng drops requests without a browser UA
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
}

HtmlFetcher = Callable[[str], Awaitable[str]]


async def fetch_html(
    url: str,
    *,
    timeout: float = FETCH_TIMEOUT_S,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Single GET, no retry. Raises FetchError on transport failure or non-2xx."""
    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers=BROWSER_HEADERS,
            transport=transport,
        ) as client:
            res = await client.get(url)
    except httpx.HTTPError as e:
        logger.error("Fetch of %s failed: %s", url, e)
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    if not res.is_success:
        logger.error("Fetch of %s returned %s %s", url, res.status_code, res.reason_phrase)
        raise FetchError(f"Failed to fetch {url}: {res.status_code}")

    html = res.text
    logger.info("Fetched %s, length: %d", url, len(html))
    return html
