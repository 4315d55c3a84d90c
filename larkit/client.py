"""
Client facade for the open platform API.

Usage:
    async with Client(ClientConfig(app_id="cli_xxx", app_secret="...")) as client:
        options = RequestOptions(tenant_access_token="t-xxx")

        # Single call: errors are logged and raised
        repos = await client.lingo.repo.list(options=options)

        # Iterator: pages until has_more is false, None on failure
        async for page in client.lingo.entity.list_with_iterator(
            {"params": {"page_size": 50}}, options
        ):
            ...

        # Anything without a typed wrapper
        body = await client.request("GET", "/open-apis/event/v1/outbound_ip")

Endpoint families are independent Resource groups attached to the client
(lingo, mail, mdm, event, block); they share the client's transport, domain
and logger and nothing else.
"""

from __future__ import annotations

from typing import Any

from larkit.api.block import Block
from larkit.api.event import Event
from larkit.api.lingo import Lingo
from larkit.api.mail import Mail
from larkit.api.mdm import Mdm
from larkit.config import ClientConfig, RequestOptions
from larkit.errors import LarkError
from larkit.http.errors import format_errors
from larkit.http.transport import HttpTransport
from larkit.http.utils import fill_api_path, format_url


class Client:
    """Async client for the open platform API."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: HttpTransport | None = None,
        **config_kwargs: Any,
    ):
        """
        Args:
            config: Client configuration; built from `config_kwargs` when omitted
            transport: HTTP transport; a default one is created when omitted
        """
        self.config = config or ClientConfig(**config_kwargs)
        self.logger = self.config.make_logger()
        self.domain = self.config.base_url
        self.transport = transport or HttpTransport(
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
            log_requests=self.config.log_requests,
            log_responses=self.config.log_responses,
        )
        self.logger.debug(f"use domain url: {self.domain}")

        self.lingo = Lingo(self)
        self.mail = Mail(self)
        self.mdm = Mdm(self)
        self.event = Event(self)
        self.block = Block(self)

        self.logger.info("client ready")

    def format_payload(
        self,
        payload: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> dict[str, dict[str, Any]]:
        """
        Merge an endpoint payload with per-call options.

        Option values win over payload values key by key. A token in the
        options becomes the Authorization header.
        """
        payload = payload or {}
        options = options or RequestOptions()

        headers = {**(payload.get("headers") or {}), **options.headers}
        token = options.access_token
        if token:
            self.logger.debug("use passed token")
            headers["Authorization"] = f"Bearer {token}"

        return {
            "params": {**(payload.get("params") or {}), **options.params},
            "data": {**(payload.get("data") or {}), **options.data},
            "headers": headers,
            "path": {**(payload.get("path") or {}), **options.path},
        }

    def build_url(self, url: str, path: dict[str, Any] | None = None) -> str:
        """Fill path arguments and prefix the domain for relative URLs."""
        filled = fill_api_path(url, path)
        if filled.startswith("http"):
            return filled
        return f"{self.domain}/{format_url(filled)}"

    async def send(
        self,
        method: str,
        url: str,
        *,
        path: dict[str, Any] | None = None,
        headers: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: Any = None,
        files: dict[str, Any] | None = None,
        raw: bool = False,
    ) -> Any:
        """
        Send one already-formatted request; log and re-raise failures.

        Raises:
            LarkError: Any transport, status or path-argument failure
        """
        try:
            target = self.build_url(url, path)
            self.logger.trace(f"send request [{method}]: {target}")
            return await self.transport.request(
                method,
                target,
                headers=headers,
                params=params,
                data=data,
                files=files,
                raw=raw,
            )
        except LarkError as e:
            self.logger.error(format_errors(e))
            raise

    async def request(
        self,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        """
        Make a single API call.

        Args:
            method: HTTP method
            url: Absolute URL or path relative to the domain; may contain
                `:name` placeholders filled from payload["path"]
            payload: Mapping with optional params, data, headers, path
            options: Per-call overrides
            raw: Return a RawResponse instead of the decoded body

        Returns:
            Decoded response body
        """
        formatted = self.format_payload(payload, options)
        return await self.send(
            method,
            url,
            path=formatted["path"],
            headers=formatted["headers"],
            params=formatted["params"],
            data=formatted["data"],
            raw=raw,
        )

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
