"""
Download receipt images over HTTP.
"""
import httpx
import logging

from ...config import settings
from ...errors import ImageFetchError

logger = logging.getLogger(__name__)


def fetch_image_bytes(url: str, client: httpx.Client) -> bytes:
    """
    Download one image.

    Raises:
        ImageFetchError: transport failure, non-2xx status or empty body
    """
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise ImageFetchError(url, f"{type(e).__name__}: {e}")

    if not response.is_success:
        raise ImageFetchError(url, f"HTTP {response.status_code}")
    if not response.content:
        raise ImageFetchError(url, "empty body")

    logger.debug(f"Fetched {len(response.content)} bytes from {url}")
    return response.content


def create_http_client() -> httpx.Client:
    """HTTP client used for one request's image downloads."""
    return httpx.Client(
        timeout=settings.image_fetch_timeout_seconds,
        follow_redirects=True,
    )
