# ==============================================================================
# Identity Sources
# ==============================================================================
"""
IdentitySource implementations.

- PortalIdentitySource: looks users up on the portal over HTTP
- StaticIdentitySource: fixed id -> name map (offline runs and tests)

Log identifiers look like "28@learn.staging.concord.org"; the portal user id
is the part before the "@".
"""

import json
import logging
from pathlib import Path
from typing import Optional

import httpx

from tereport.base import IdentitySource
from tereport.exceptions import IdentityFetchError
from tereport.utils.config import PortalSettings, get_settings
from tereport.utils.retry import HTTPX_RETRY_EXCEPTIONS, retry_light
from tereport.utils.versions import get_user_agent

logger = logging.getLogger(__name__)


def portal_user_id(teacher_id: str) -> Optional[str]:
    """Numeric portal user id of a log identifier, or None if it has none."""
    user_id = teacher_id.split("@", 1)[0].strip()
    return user_id if user_id.isdigit() else None


class PortalIdentitySource(IdentitySource):
    """
    Resolves names via GET https://<portal>/users/<id>.json.

    The response must carry "first_name" and/or "last_name".
    """

    def __init__(
        self,
        settings: Optional[PortalSettings] = None,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Portal settings. If None, uses application settings.
            token: Bearer token; overrides the configured token when given
            client: HTTP client to use. If None, one is created and owned here.
        """
        self._settings = settings or get_settings().portal
        bearer = token or self._settings.token
        self._headers = {"User-Agent": get_user_agent()}
        if bearer:
            self._headers["Authorization"] = f"Bearer {bearer}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self._settings.timeout_seconds)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "PortalIdentitySource":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @retry_light(HTTPX_RETRY_EXCEPTIONS, logger)
    async def _get(self, url: str) -> httpx.Response:
        return await self._client.get(url, headers=self._headers)

    async def fetch_name(self, teacher_id: str) -> str:
        user_id = portal_user_id(teacher_id)
        if user_id is None:
            raise IdentityFetchError(f"{teacher_id!r} is not a portal user identifier")

        url = f"{self._settings.base_url}/users/{user_id}.json"
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            raise IdentityFetchError(f"Transport error fetching {url}: {e}", url=url) from e

        if response.is_error:
            raise IdentityFetchError(
                f"Portal returned {response.status_code} for {url}",
                url=url,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            parts = [data.get("first_name") or "", data.get("last_name") or ""]
        except (ValueError, AttributeError) as e:
            raise IdentityFetchError(
                f"Unparseable user record from {url}", url=url, status_code=response.status_code
            ) from e

        name = " ".join(part.strip() for part in parts if isinstance(part, str) and part.strip())
        if not name:
            raise IdentityFetchError(
                f"No name in user record from {url}", url=url, status_code=response.status_code
            )
        return name


class StaticIdentitySource(IdentitySource):
    """Resolves names from a fixed mapping."""

    def __init__(self, names: dict[str, str]):
        self._names = dict(names)

    @classmethod
    def from_json_file(cls, path: Path) -> "StaticIdentitySource":
        """
        Load a {"<teacher id>": "<name>", ...} JSON file.

        Raises:
            IdentityFetchError: If the file is unreadable or not an object
        """
        try:
            names = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise IdentityFetchError(f"Cannot read names file {path}: {e}") from e
        if not isinstance(names, dict):
            raise IdentityFetchError(f"Names file {path} must contain a JSON object")
        return cls({str(k): str(v) for k, v in names.items()})

    async def fetch_name(self, teacher_id: str) -> str:
        try:
            return self._names[teacher_id]
        except KeyError:
            raise IdentityFetchError(f"Unknown teacher {teacher_id!r}") from None
