"""
Frame handling for the long-lived event connection.

WSSession holds everything about the connection except the socket itself:
fetching the connect URL, building pings, reacting to pongs, reassembling
split events, dispatching them and producing the acknowledgement frame.
Whoever owns the socket drives it:

    session = WSSession(app_id="cli_xxx", app_secret="...", event_dispatcher=dispatcher)
    if await session.pull_connect_config():
        async with connect(session.config.connect_url) as ws:
            await ws.send(session.ping_frame().encode())
            async for message in ws:
                reply = await session.handle_message(message)
                if reply is not None:
                    await ws.send(reply)

Decoding errors from handle_message propagate: a corrupt frame means the
caller has to decide whether to drop it or reconnect.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import replace

from pydantic import ValidationError as PydanticValidationError

from larkit.config import Domain, format_domain
from larkit.dispatcher.event import EventDispatcher
from larkit.errors import LarkError, ProtocolError
from larkit.http.transport import HttpTransport
from larkit.logger import LoggerLevel, LoggerProxy
from larkit.ws import pbbp2
from larkit.ws.config import EndpointResponse, ServerClientConfig, WSConfig
from larkit.ws.data_cache import DataCache
from larkit.ws.enums import ErrorCode, FrameType, HeaderKey, HttpStatusCode, MessageType
from larkit.ws.pbbp2 import Frame, Header


class WSSession:
    """Socket-free state machine of one event connection."""

    def __init__(
        self,
        *,
        app_id: str,
        app_secret: str,
        domain: Domain | str = Domain.FEISHU,
        event_dispatcher: EventDispatcher | None = None,
        transport: HttpTransport | None = None,
        auto_reconnect: bool = True,
        logger_level: LoggerLevel = LoggerLevel.INFO,
        logger: logging.Logger | None = None,
    ):
        self.logger = LoggerProxy(logger_level, logger)
        if not app_id:
            self.logger.error("appId is needed")
        if not app_secret:
            self.logger.error("appSecret is needed")

        self.config = WSConfig(
            app_id=app_id,
            app_secret=app_secret,
            domain=format_domain(domain),
            auto_reconnect=auto_reconnect,
        )
        self.event_dispatcher = event_dispatcher
        self.transport = transport or HttpTransport()
        self.data_cache = DataCache(logger=self.logger)

    async def pull_connect_config(self) -> bool:
        """
        Ask the platform for a socket URL and connection settings.

        Returns:
            True when the config was applied, False on any failure (logged)
        """
        try:
            body = await self.transport.request(
                "POST",
                self.config.endpoint_url,
                data={"AppID": self.config.app_id, "AppSecret": self.config.app_secret},
                # consumed by the gateway
                headers={"locale": "zh"},
            )
            response = EndpointResponse.model_validate(body or {})
        except (LarkError, PydanticValidationError) as e:
            self.logger.error(f"[ws] {e}")
            return False

        if response.code != ErrorCode.OK:
            self.logger.error(f"[ws] code: {response.code}, {response.msg or 'system busy'}")
            return False

        if response.data is None or not response.data.url:
            self.logger.error("[ws] connect config has no url")
            return False

        self.config.apply_connect_url(response.data.url)
        self.config.apply_server_config(response.data.client_config)
        self.logger.debug(f"[ws] get connect config success, ws url: {response.data.url}")
        return True

    def ping_frame(self) -> Frame:
        return Frame(
            seq_id=0,
            log_id=0,
            service=int(self.config.service_id or 0),
            method=FrameType.CONTROL,
            headers=[Header(key=HeaderKey.TYPE.value, value=MessageType.PING.value)],
        )

    async def handle_message(self, data: bytes) -> bytes | None:
        """
        Decode one socket message and return the encoded reply, if any.

        Raises:
            ProtocolError: If the message is not a valid Frame, or an event
                frame carries unusable sum/seq headers or a non-JSON body
        """
        frame = pbbp2.decode(data)
        reply = await self.handle_frame(frame)
        return reply.encode() if reply is not None else None

    async def handle_frame(self, frame: Frame) -> Frame | None:
        if frame.method == FrameType.CONTROL:
            self._handle_control(frame)
            return None
        if frame.method == FrameType.DATA:
            return await self._handle_event(frame)
        self.logger.debug(f"[ws] ignore frame with method {frame.method}")
        return None

    def _handle_control(self, frame: Frame) -> None:
        message_type = frame.header(HeaderKey.TYPE.value)
        if message_type == MessageType.PING.value:
            return
        if message_type == MessageType.PONG.value and frame.payload:
            self.logger.trace("[ws] receive pong")
            try:
                server_config = ServerClientConfig.model_validate_json(frame.payload)
            except PydanticValidationError as e:
                self.logger.warn(f"[ws] ignore malformed pong payload: {e}")
                return
            self.config.apply_server_config(server_config)
            self.logger.trace("[ws] update wsConfig with pong data")

    async def _handle_event(self, frame: Frame) -> Frame | None:
        headers = frame.header_map()
        message_type = headers.get(HeaderKey.TYPE.value)
        if message_type != MessageType.EVENT.value:
            return None

        message_id = headers.get(HeaderKey.MESSAGE_ID.value, "")
        trace_id = headers.get(HeaderKey.TRACE_ID.value, "")
        try:
            merged = self.data_cache.merge_data(
                message_id=message_id,
                total=int(headers.get(HeaderKey.SUM.value) or 1),
                seq=int(headers.get(HeaderKey.SEQ.value) or 0),
                trace_id=trace_id,
                data=frame.payload or b"",
            )
        except ValueError as e:
            # bad sum/seq headers or a body that is not JSON
            raise ProtocolError(f"invalid event frame {message_id}: {e}") from e
        if merged is None:
            return None

        self.logger.debug(
            f"[ws] receive message, message_type: {message_type}; "
            f"message_id: {message_id}; trace_id: {trace_id}"
        )

        code = HttpStatusCode.OK
        started = time.monotonic()
        if self.event_dispatcher is not None:
            try:
                await self.event_dispatcher.invoke(merged, need_check=False)
            except Exception as e:
                self.logger.error(f"[ws] handle event {message_id} failed: {e}", exc_info=True)
                code = HttpStatusCode.INTERNAL_SERVER_ERROR
        elapsed_ms = int((time.monotonic() - started) * 1000)

        return replace(
            frame,
            headers=[*frame.headers, Header(key=HeaderKey.BIZ_RT.value, value=str(elapsed_ms))],
            payload=json.dumps({"code": int(code)}).encode("utf-8"),
        )
