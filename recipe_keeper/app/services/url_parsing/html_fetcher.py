"""HTML fetching and URL validation utilities."""

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx

from recipe_keeper.app.core.config import get_settings
from recipe_keeper.app.services.url_parsing.errors import FetchError

logger = logging.getLogger(__name__)

_META_CHARSET_RE = re.compile(r"<meta[^>]+charset=[\"']?([^\"'>\s;]+)", re.I)


def is_private_host(host: str) -> bool:
    """Check if a host is private/localhost.

    Accepts a bare hostname, a bracketed IPv6 literal or ``host:port``.
    """
    hostname = host.strip()
    if hostname.startswith("["):
        hostname = hostname[1:].split("]")[0]
    elif hostname.count(":") == 1:
        hostname = hostname.split(":")[0]
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return hostname.lower() in {"localhost"}
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved or ip.is_unspecified


def _charset_from_content_type(content_type: str) -> Optional[str]:
    if "charset=" not in content_type.lower():
        return None
    try:
        return content_type.lower().split("charset=")[1].split(";")[0].strip().strip("\"'") or None
    except IndexError:
        return None


def decode_html(content: bytes, content_type: str = "") -> str:
    """Decode a response body using the header charset, then a <meta charset> hint."""
    encoding = _charset_from_content_type(content_type) or "utf-8"
    try:
        return content.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        logger.debug("Body did not decode as %s; looking for a meta charset", encoding)

    text = content.decode("utf-8", errors="replace")
    match = _META_CHARSET_RE.search(text[:4096])
    if match:
        detected = match.group(1).lower()
        if detected != encoding:
            try:
                return content.decode(detected)
            except (UnicodeDecodeError, LookupError):
                logger.warning("Meta charset %s did not decode the page either", detected)
    return text


async def fetch_html(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Fetch a page with browser-like headers.

    Raises FetchError for invalid or private URLs, transport errors, non-success
    statuses and non-HTML responses.
    """
    try:
        parsed_url = urlparse(url)
        hostname = parsed_url.hostname or ""
    except ValueError as exc:
        raise FetchError("invalid_url", f"Malformed URL: {exc}") from exc
    if parsed_url.scheme not in {"http", "https"} or not parsed_url.netloc:
        raise FetchError("invalid_url", "URL must start with http or https.")
    if is_private_host(hostname):
        raise FetchError("invalid_url", "Host is blocked (localhost/private).")

    settings = get_settings()
    headers = {
        "User-Agent": settings.scraper_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Connection": "keep-alive",
    }
    if settings.scraper_cookies:
        headers["Cookie"] = settings.scraper_cookies
    timeout = httpx.Timeout(
        settings.scraper_timeout_seconds, connect=settings.scraper_connect_timeout_seconds
    )

    try:
        async with httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, headers=headers, transport=transport
        ) as client:
            response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.warning("Fetching %s returned status %s", url, status)
        raise FetchError("fetch_failed", f"Site returned status {status}.") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Fetching %s failed: %s", url, exc)
        raise FetchError("fetch_failed", f"Network error: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if content_type and "text/html" not in content_type and "application/xhtml" not in content_type:
        raise FetchError("unsupported_content_type", f"Unsupported content type: {content_type}")

    return decode_html(response.content, content_type)
