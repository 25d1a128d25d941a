"""
HTTP capability for VulkanKit.

Provides a thin client over requests for the two remote operations the
resolver needs:

- a metadata-only availability probe (HEAD) that classifies a URL as
  downloadable (exactly HTTP 200) or raises AvailabilityError
- a JSON GET used for vendor version documents and GitHub release data

No retries happen at this layer; retry policy belongs to the caller.
"""

import logging
from typing import Any, Optional

import requests
from requests.exceptions import RequestException

from vulkankit import __version__
from vulkankit.core.exceptions import AvailabilityError, RemoteDataError

logger = logging.getLogger(__name__)

USER_AGENT = f"vulkankit/{__version__}"

DEFAULT_TIMEOUT = 30


class HttpClient:
    """
    HTTP client used for availability probes and JSON documents.

    Example:
        >>> client = HttpClient()
        >>> client.is_downloadable("VULKAN_SDK", "1.4.304.0", url)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """
        Initialize HTTP client.

        Args:
            session: Optional requests session (a new one is created if None)
            timeout: Request timeout in seconds
        """
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.timeout = timeout

    def head_status(self, url: str) -> int:
        """
        Issue a HEAD request and return the final status code.

        Redirects are followed, the download host answers with redirects
        to a CDN.

        Raises:
            RequestException: On transport failure
        """
        response = self.session.head(url, allow_redirects=True, timeout=self.timeout)
        return response.status_code

    def is_downloadable(self, label: str, version: str, url: str) -> None:
        """
        Check that an artifact URL is downloadable.

        Args:
            label: Artifact label used in messages (e.g. 'VULKAN_SDK')
            version: Artifact version used in messages
            url: URL to probe

        Raises:
            AvailabilityError: If the status is not 200 or the request fails
        """
        try:
            status = self.head_status(url)
        except RequestException as e:
            raise AvailabilityError(label, version, url, reason=str(e)) from e

        if status != 200:
            raise AvailabilityError(label, version, url, reason=f"HTTP {status}")

        logger.info(f"Http({status}): The requested {label} {version} is downloadable.")

    def get_json(self, url: str) -> Any:
        """
        GET a JSON document.

        Args:
            url: Document URL

        Returns:
            Decoded JSON value

        Raises:
            RemoteDataError: On transport failure, error status, invalid
                JSON or an empty (null) document
        """
        logger.debug(f"Fetching JSON from {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except RequestException as e:
            raise RemoteDataError(f"Failed to fetch {url}: {e}") from e
        except ValueError as e:
            raise RemoteDataError(f"Invalid JSON returned by {url}: {e}") from e

        if result is None:
            raise RemoteDataError(f"Empty JSON document returned by {url}")
        return result
