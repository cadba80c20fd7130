"""
Client configuration.

A ClientConfig is created once by a ClientBuilder and then frozen; both the
blocking Client and the AsyncClient only ever read it. Defaults point at the
production querycourse host.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    import httpx
    import requests

    from querycourse.async_client import AsyncClient
    from querycourse.client import Client


# ---------------------------------------------------------------------------
# Defaults & endpoints
# ---------------------------------------------------------------------------

DEFAULT_BASE_URL = "https://querycourse.ntust.edu.tw/querycourse/api"

# The API may reject requests without a browser-like user agent.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)

DEFAULT_TIMEOUT = 10.0

SEARCH_PATH = "courses"
# sic: the upstream endpoint is spelled "detials"
DETAILS_PATH = "coursedetials"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    local_address: Optional[str] = None

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class ClientBuilder:
    """
    Collects options, then builds a Client or an AsyncClient.

        client = ClientBuilder().timeout(5).local_address("10.0.0.2").build()

    Every setter validates its value and returns the builder. The built client
    gets a frozen copy of the configuration; changing the builder afterwards
    does not affect it.
    """

    def __init__(self) -> None:
        self._config = ClientConfig()
        self._session: Optional["requests.Session"] = None
        self._http_client: Optional["httpx.AsyncClient"] = None

    def base_url(self, url: str) -> "ClientBuilder":
        url = url.strip()
        if not url:
            raise ValueError("base_url must not be empty")
        self._config = replace(self._config, base_url=url)
        return self

    def user_agent(self, agent: str) -> "ClientBuilder":
        if not agent.strip():
            raise ValueError("user_agent must not be empty")
        self._config = replace(self._config, user_agent=agent)
        return self

    def timeout(self, seconds: float) -> "ClientBuilder":
        if seconds <= 0:
            raise ValueError(f"timeout must be positive, got {seconds!r}")
        self._config = replace(self._config, timeout=float(seconds))
        return self

    def local_address(self, address: Optional[str]) -> "ClientBuilder":
        self._config = replace(self._config, local_address=address or None)
        return self

    def config(self, config: ClientConfig) -> "ClientBuilder":
        self._config = config
        return self

    def session(self, session: "requests.Session") -> "ClientBuilder":
        """
        Use an existing requests.Session for the blocking client.
        local_address is not applied to sessions supplied here.
        """
        self._session = session
        return self

    def http_client(self, client: "httpx.AsyncClient") -> "ClientBuilder":
        """
        Use an existing httpx.AsyncClient for the async client.
        local_address is not applied to clients supplied here.
        """
        self._http_client = client
        return self

    def build(self) -> "Client":
        from querycourse.client import Client

        return Client(self._config, session=self._session)

    def build_async(self) -> "AsyncClient":
        from querycourse.async_client import AsyncClient

        return AsyncClient(self._config, http_client=self._http_client)
