"""
Tests for the socket-free event connection session.

Tests cover:
- Pulling the connect config
- Ping frames and pong handling
- Event frames: reassembly, dispatch and acknowledgement
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from larkit.config import Domain
from larkit.dispatcher.event import EventDispatcher
from larkit.errors import ProtocolError, TransportError
from larkit.ws import WSSession
from larkit.ws.enums import FrameType
from larkit.ws.pbbp2 import Frame, Header

EVENT_BODY = {
    "schema": "2.0",
    "header": {"event_type": "im.message.receive_v1", "event_id": "ev-1"},
    "event": {"message": {"message_id": "om_1", "content": "hi"}},
}


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def transport():
    transport = MagicMock()
    transport.request = AsyncMock()
    return transport


@pytest.fixture
def handler():
    return AsyncMock(return_value=None)


@pytest.fixture
def session(transport, handler):
    dispatcher = EventDispatcher().register({"im.message.receive_v1": handler})
    return WSSession(
        app_id="cli_a",
        app_secret="secret",
        event_dispatcher=dispatcher,
        transport=transport,
    )


def event_frame(payload, *, message_id="m1", total=1, seq=0, message_type="event"):
    return Frame(
        seq_id=11,
        log_id=22,
        service=33,
        method=FrameType.DATA,
        headers=[
            Header(key="type", value=message_type),
            Header(key="message_id", value=message_id),
            Header(key="sum", value=str(total)),
            Header(key="seq", value=str(seq)),
            Header(key="trace_id", value="trace-1"),
        ],
        payload=payload,
    )


# =============================================================================
# Connect Config Tests
# =============================================================================


class TestPullConnectConfig:
    @pytest.mark.asyncio
    async def test_success(self, session, transport):
        transport.request.return_value = {
            "code": 0,
            "data": {
                "URL": "wss://msg-frontier.feishu.cn/ws/v2?device_id=d1&service_id=33",
                "ClientConfig": {
                    "PingInterval": 90,
                    "ReconnectCount": 3,
                    "ReconnectInterval": 60,
                    "ReconnectNonce": 10,
                },
            },
        }

        assert await session.pull_connect_config() is True

        config = session.config
        assert config.connect_url.startswith("wss://msg-frontier.feishu.cn/ws/v2")
        assert config.device_id == "d1"
        assert config.service_id == "33"
        assert config.ping_interval == 90
        assert config.reconnect_count == 3
        assert not config.infinite_reconnect

        transport.request.assert_awaited_once_with(
            "POST",
            "https://open.feishu.cn/callback/ws/endpoint",
            data={"AppID": "cli_a", "AppSecret": "secret"},
            headers={"locale": "zh"},
        )

    @pytest.mark.asyncio
    async def test_lark_domain(self, transport):
        session = WSSession(app_id="a", app_secret="s", domain=Domain.LARK, transport=transport)
        transport.request.return_value = {"code": 0, "data": {"URL": "wss://x/ws"}}

        assert await session.pull_connect_config() is True
        assert transport.request.await_args.args[1] == "https://open.larksuite.com/callback/ws/endpoint"

    @pytest.mark.asyncio
    async def test_business_error(self, session, transport):
        transport.request.return_value = {"code": 514, "msg": "auth failed"}

        assert await session.pull_connect_config() is False
        assert session.config.connect_url == ""

    @pytest.mark.asyncio
    async def test_missing_url(self, session, transport):
        transport.request.return_value = {"code": 0, "data": {}}

        assert await session.pull_connect_config() is False

    @pytest.mark.asyncio
    async def test_transport_failure(self, session, transport):
        transport.request.side_effect = TransportError("Network error: reset")

        assert await session.pull_connect_config() is False


# =============================================================================
# Control Frame Tests
# =============================================================================


class TestControlFrames:
    def test_ping_frame(self, session):
        session.config.service_id = "33"

        frame = session.ping_frame()

        assert frame.method == FrameType.CONTROL
        assert frame.service == 33
        assert frame.headers == [Header(key="type", value="ping")]
        assert Frame.decode(frame.encode()) == frame

    @pytest.mark.asyncio
    async def test_pong_updates_config(self, session):
        pong = Frame(
            seq_id=0,
            log_id=0,
            service=33,
            method=FrameType.CONTROL,
            headers=[Header(key="type", value="pong")],
            payload=json.dumps({"PingInterval": 30, "ReconnectNonce": 5}).encode(),
        )

        assert await session.handle_frame(pong) is None
        assert session.config.ping_interval == 30
        assert session.config.reconnect_nonce == 5
        assert session.config.reconnect_interval == 120

    @pytest.mark.asyncio
    async def test_malformed_pong_is_ignored(self, session):
        pong = Frame(
            seq_id=0,
            log_id=0,
            service=33,
            method=FrameType.CONTROL,
            headers=[Header(key="type", value="pong")],
            payload=b"not json",
        )

        assert await session.handle_frame(pong) is None
        assert session.config.ping_interval == 120


# =============================================================================
# Data Frame Tests
# =============================================================================


class TestEventFrames:
    @pytest.mark.asyncio
    async def test_dispatches_and_acknowledges(self, session, handler):
        frame = event_frame(json.dumps(EVENT_BODY).encode())

        reply = await session.handle_frame(frame)

        handler.assert_awaited_once()
        event = handler.await_args.args[0]
        assert event["event_type"] == "im.message.receive_v1"
        assert event["message"] == {"message_id": "om_1", "content": "hi"}

        assert reply.seq_id == 11
        assert reply.service == 33
        assert [h.key for h in reply.headers][-1] == "biz_rt"
        assert int(reply.header("biz_rt")) >= 0
        assert json.loads(reply.payload) == {"code": 200}
        # the incoming frame is left untouched
        assert len(frame.headers) == 5

    @pytest.mark.asyncio
    async def test_split_event(self, session, handler):
        body = json.dumps(EVENT_BODY).encode()

        assert await session.handle_frame(event_frame(body[20:], total=2, seq=1)) is None
        handler.assert_not_awaited()

        reply = await session.handle_frame(event_frame(body[:20], total=2, seq=0))

        handler.assert_awaited_once()
        assert json.loads(reply.payload) == {"code": 200}

    @pytest.mark.asyncio
    async def test_signature_not_checked(self, transport, handler):
        dispatcher = EventDispatcher(encrypt_key="key").register({"im.message.receive_v1": handler})
        session = WSSession(
            app_id="cli_a", app_secret="s", event_dispatcher=dispatcher, transport=transport
        )

        await session.handle_frame(event_frame(json.dumps(EVENT_BODY).encode()))

        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_handler_failure_answers_500(self, session, handler):
        handler.side_effect = RuntimeError("boom")

        reply = await session.handle_frame(event_frame(json.dumps(EVENT_BODY).encode()))

        assert json.loads(reply.payload) == {"code": 500}

    @pytest.mark.asyncio
    async def test_non_event_data_is_ignored(self, session, handler):
        reply = await session.handle_frame(event_frame(b"{}", message_type="card"))

        assert reply is None
        handler.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_handle_message_bytes(self, session, handler):
        data = event_frame(json.dumps(EVENT_BODY).encode()).encode()

        reply = Frame.decode(await session.handle_message(data))

        assert reply.log_id == 22
        assert json.loads(reply.payload) == {"code": 200}

    @pytest.mark.asyncio
    async def test_handle_message_rejects_corrupt_frames(self, session):
        with pytest.raises(ProtocolError):
            await session.handle_message(b"\x08")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "total, seq, payload",
        [
            ("x", 0, b"{}"),
            (1, "y", b"{}"),
            (0, 0, b"{}"),
            (1, 0, b"not json"),
            (1, 0, b"\xff\xfe"),
        ],
    )
    async def test_unusable_event_frame_raises_protocol_error(self, session, handler, total, seq, payload):
        frame = event_frame(payload, total=total, seq=seq)

        with pytest.raises(ProtocolError, match="invalid event frame m1"):
            await session.handle_message(frame.encode())

        handler.assert_not_awaited()
