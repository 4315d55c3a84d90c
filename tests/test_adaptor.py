"""
Tests for the web framework adaptors.

Tests cover:
- URL verification challenge (plain and encrypted)
- FastAPI router for events and card callbacks
- Framework-neutral adapt_custom
"""

import hashlib
import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from larkit.adaptor import adapt_custom, create_router, generate_challenge
from larkit.dispatcher import CardActionHandler, EventDispatcher

ENCRYPTED_CHALLENGE = (
    "tT1xP+ovuc0T3b/rnZX3ax76exqAn0ANQ6/U45GcciC0mgNBc8JtvqOJGNAPMKpgRs2dVU1NYk9VDeqS8T4SYtU0hzNU54aS"
    "84WnxvZ3VFfDcy/RyABlNqlUiGyLDzFI0yxdCMT4KR/YEQXlt6nZi50KwRlZ+A75r645KesZuLMljezYyY8VeeXEVjPw35+e"
)

CHALLENGE = {"challenge": "ajls384kdjx98XX", "type": "url_verification"}

EVENT = {
    "schema": "2.0",
    "header": {"event_type": "im.message.receive_v1"},
    "event": {"message": {"content": "hi"}},
}


def make_app(dispatcher, **kwargs):
    app = FastAPI()
    app.include_router(create_router("/webhook/event", dispatcher, **kwargs))
    return TestClient(app)


# =============================================================================
# Challenge Tests
# =============================================================================


class TestGenerateChallenge:
    def test_plain(self):
        assert generate_challenge(CHALLENGE) == (True, {"challenge": "ajls384kdjx98XX"})

    def test_encrypted(self):
        is_challenge, challenge = generate_challenge({"encrypt": ENCRYPTED_CHALLENGE}, "mazhe.nerd")

        assert is_challenge
        assert challenge == {"challenge": "5634b122-c042-4634-bc7f-b07a3c3e77ad"}

    def test_not_a_challenge(self):
        assert generate_challenge({}) == (False, {"challenge": None})

    def test_encrypted_without_key(self):
        with pytest.raises(ValueError, match="auto-challenge need encryptKey"):
            generate_challenge({"encrypt": "encrypt"}, "")


# =============================================================================
# FastAPI Router Tests
# =============================================================================


class TestFastAPIRouter:
    def test_answers_challenge(self):
        client = make_app(EventDispatcher(), auto_challenge=True)

        response = client.post("/webhook/event", json=CHALLENGE)

        assert response.status_code == 200
        assert response.json() == {"challenge": "ajls384kdjx98XX"}

    def test_challenge_disabled_goes_to_dispatcher(self):
        handler = AsyncMock()
        dispatcher = EventDispatcher().register({"im.message.receive_v1": handler})
        client = make_app(dispatcher)

        response = client.post("/webhook/event", json=CHALLENGE)

        assert response.status_code == 200
        assert response.text == ""
        handler.assert_not_awaited()

    def test_dispatches_event(self):
        handler = AsyncMock(return_value="ignored")
        dispatcher = EventDispatcher().register({"im.message.receive_v1": handler})
        client = make_app(dispatcher)

        response = client.post("/webhook/event", json=EVENT)

        assert response.status_code == 200
        assert response.text == ""
        assert handler.await_args.args[0]["message"] == {"content": "hi"}

    def test_signature_checked_on_raw_body(self):
        body = json.dumps(EVENT, indent=2)
        timestamp, nonce = "1700000000", "n-1"
        signature = hashlib.sha256((timestamp + nonce + "encrypt-key" + body).encode()).hexdigest()
        handler = AsyncMock()
        dispatcher = EventDispatcher(encrypt_key="encrypt-key").register({"im.message.receive_v1": handler})
        client = make_app(dispatcher)

        client.post(
            "/webhook/event",
            content=body,
            headers={
                "Content-Type": "application/json",
                "X-Lark-Request-Timestamp": timestamp,
                "X-Lark-Request-Nonce": nonce,
                "X-Lark-Signature": signature,
            },
        )

        handler.assert_awaited_once()

    def test_card_result_is_returned(self):
        card = CardActionHandler(lambda data: {"elements": [data["action"]["value"]]})
        client = make_app(card)

        response = client.post("/webhook/event", json={"action": {"value": {"k": "v"}}})

        assert response.json() == {"elements": [{"k": "v"}]}

    def test_non_json_body(self):
        client = make_app(EventDispatcher())

        response = client.post("/webhook/event", content=b"not json")

        assert response.status_code == 200
        assert response.text == ""


# =============================================================================
# adapt_custom Tests
# =============================================================================


class TestAdaptCustom:
    @pytest.mark.asyncio
    async def test_challenge(self):
        handle = adapt_custom(EventDispatcher(), auto_challenge=True)

        assert json.loads(await handle({"h": "1"}, CHALLENGE)) == {"challenge": "ajls384kdjx98XX"}

    @pytest.mark.asyncio
    async def test_event(self):
        handler = AsyncMock()
        handle = adapt_custom(EventDispatcher().register({"im.message.receive_v1": handler}))

        assert await handle({"h": "1"}, EVENT) == ""
        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_card(self):
        handle = adapt_custom(CardActionHandler(lambda data: {"ok": True}))

        assert await handle({"h": "1"}, {"action": {}}) == '{"ok": true}'

    @pytest.mark.asyncio
    async def test_missing_input(self):
        handle = adapt_custom(EventDispatcher())

        assert await handle({}, EVENT) is None
        assert await handle({"h": "1"}, {}) is None
