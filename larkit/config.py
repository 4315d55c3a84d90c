"""
Configuration for larkit clients.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from larkit.logger import LoggerLevel, LoggerProxy

DEFAULT_USER_AGENT = "larkit-python/0.1.0"


class Domain(str, Enum):
    """Hosted platform domains."""

    FEISHU = "feishu"
    LARK = "lark"


_DOMAIN_URLS = {
    Domain.FEISHU: "https://open.feishu.cn",
    Domain.LARK: "https://open.larksuite.com",
}


def format_domain(domain: Domain | str) -> str:
    """
    Resolve a Domain to its base URL.

    Any other string (a private deployment, a test server) is returned unchanged.
    """
    if isinstance(domain, Domain):
        return _DOMAIN_URLS[domain]
    return domain


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Configuration for a Client."""

    # Application credentials
    app_id: str = ""
    app_secret: str = ""

    # Connection
    domain: Domain | str = Domain.FEISHU
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    # Observability
    logger_level: LoggerLevel = LoggerLevel.INFO
    logger: logging.Logger | None = None
    log_requests: bool = False
    log_responses: bool = False

    def __post_init__(self):
        # Missing credentials are reported, not rejected: calls that carry an
        # explicit user token still work without them.
        log = self.make_logger()
        if not self.app_id:
            log.error("appId is needed")
        if not self.app_secret:
            log.error("appSecret is needed")

    @property
    def base_url(self) -> str:
        """Formatted domain URL."""
        return format_domain(self.domain)

    def make_logger(self) -> LoggerProxy:
        """Build a LoggerProxy honoring logger_level."""
        return LoggerProxy(self.logger_level, self.logger or logging.getLogger("larkit"))


@dataclass(slots=True)
class RequestOptions:
    """
    Per-call overrides merged on top of an endpoint payload.

    Tokens are passed through as-is; obtaining or refreshing them is up to
    the caller.
    """

    headers: dict[str, Any] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    path: dict[str, Any] = field(default_factory=dict)
    user_access_token: str | None = None
    tenant_access_token: str | None = None

    @property
    def access_token(self) -> str | None:
        """Token to send, user token first."""
        return self.user_access_token or self.tenant_access_token
