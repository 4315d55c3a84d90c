"""
Connection settings for the long-lived event connection.

The server hands out settings twice: in the connect-config response (with
the socket URL) and again in every pong payload. Both use the same
ClientConfig shape, with intervals expressed in seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from larkit.config import Domain, format_domain

WS_ENDPOINT_PATH = "/callback/ws/endpoint"


# =============================================================================
# Wire Schemas
# =============================================================================


class ServerClientConfig(BaseModel):
    """Connection tuning sent by the server."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ping_interval: float | None = Field(None, alias="PingInterval")
    reconnect_count: int | None = Field(None, alias="ReconnectCount")
    reconnect_interval: float | None = Field(None, alias="ReconnectInterval")
    reconnect_nonce: float | None = Field(None, alias="ReconnectNonce")


class EndpointData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str = Field("", alias="URL")
    client_config: ServerClientConfig = Field(default_factory=ServerClientConfig, alias="ClientConfig")


class EndpointResponse(BaseModel):
    """Body of POST /callback/ws/endpoint."""

    model_config = ConfigDict(extra="ignore")

    code: int = 0
    msg: str = ""
    data: EndpointData | None = None


# =============================================================================
# Runtime Config
# =============================================================================


@dataclass(slots=True)
class WSConfig:
    """Mutable connection state for one WSSession."""

    app_id: str = ""
    app_secret: str = ""
    domain: str = format_domain(Domain.FEISHU)

    connect_url: str = ""
    ping_interval: float = 120.0
    reconnect_count: int = -1
    reconnect_interval: float = 120.0
    reconnect_nonce: float = 30.0

    device_id: str = ""
    service_id: str = ""

    auto_reconnect: bool = True

    @property
    def endpoint_url(self) -> str:
        """URL that hands out the socket address."""
        return f"{self.domain}{WS_ENDPOINT_PATH}"

    @property
    def infinite_reconnect(self) -> bool:
        return self.reconnect_count < 0

    def apply_server_config(self, server: ServerClientConfig) -> None:
        """Overwrite tuning values the server sent; keep the rest."""
        if server.ping_interval is not None:
            self.ping_interval = server.ping_interval
        if server.reconnect_count is not None:
            self.reconnect_count = server.reconnect_count
        if server.reconnect_interval is not None:
            self.reconnect_interval = server.reconnect_interval
        if server.reconnect_nonce is not None:
            self.reconnect_nonce = server.reconnect_nonce

    def apply_connect_url(self, url: str) -> None:
        """Store the socket URL and the ids carried in its query string."""
        query = parse_qs(urlsplit(url).query)
        self.connect_url = url
        self.device_id = query.get("device_id", [""])[0]
        self.service_id = query.get("service_id", [""])[0]
