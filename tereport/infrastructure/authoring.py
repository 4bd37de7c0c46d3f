# ==============================================================================
# Authoring Service Client
# ==============================================================================
"""
HTTP implementation of ModuleSource against the content-authoring service.

Exports are fetched from:
    https://<server>/activities/<id>/export.json
    https://<server>/sequences/<id>/export.json

Transport errors are retried (standard retry). HTTP error statuses and
unparseable bodies become ModuleFetchError carrying the URL and status;
an empty body is reported as "no content" (None).
"""

import logging
from typing import Optional

import httpx

from tereport.base import ModuleSource
from tereport.core.modules import is_sequence
from tereport.exceptions import ModuleFetchError
from tereport.utils.config import AuthoringSettings, get_settings
from tereport.utils.retry import HTTPX_RETRY_EXCEPTIONS, retry_standard
from tereport.utils.versions import get_user_agent

logger = logging.getLogger(__name__)


def export_url(base_url: str, module_type: str, module_id: str) -> str:
    """Build the export URL for an activity or sequence."""
    collection = "sequences" if is_sequence(module_type) else "activities"
    return f"{base_url}/{collection}/{module_id}/export.json"


class AuthoringModuleSource(ModuleSource):
    """
    Fetches activity and sequence exports over HTTP.

    Use as an async context manager, or call close() when done.
    """

    def __init__(
        self,
        settings: Optional[AuthoringSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Authoring settings. If None, uses application settings.
            client: HTTP client to use (tests pass one with a mock transport).
                If None, a client is created and owned by this source.
        """
        self._settings = settings or get_settings().authoring
        self._headers = {"User-Agent": get_user_agent(), **self._settings.auth_headers}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self._settings.timeout_seconds)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AuthoringModuleSource":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @retry_standard(HTTPX_RETRY_EXCEPTIONS, logger)
    async def _get(self, url: str) -> httpx.Response:
        return await self._client.get(url, headers=self._headers)

    async def fetch_module(self, module_type: str, module_id: str) -> Optional[dict]:
        url = export_url(self._settings.base_url, module_type, module_id)
        logger.debug("Fetching module export %s", url)

        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            raise ModuleFetchError(f"Transport error fetching {url}: {e}", url=url) from e

        if response.is_error:
            raise ModuleFetchError(
                f"Authoring service returned {response.status_code} for {url}",
                url=url,
                status_code=response.status_code,
            )

        if not response.content.strip():
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise ModuleFetchError(
                f"Invalid JSON in export from {url}", url=url, status_code=response.status_code
            ) from e

        if data is None:
            return None
        if not isinstance(data, dict):
            raise ModuleFetchError(
                f"Unexpected export shape from {url}: {type(data).__name__}",
                url=url,
                status_code=response.status_code,
            )
        return data
