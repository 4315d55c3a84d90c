"""
FastAPI adaptor.

Usage:
    from fastapi import FastAPI
    from larkit.adaptor import create_router

    app = FastAPI()
    app.include_router(
        create_router("/webhook/event", dispatcher, auto_challenge=True)
    )

The route reads the raw body so that signatures are checked against the
exact bytes the platform sent.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from larkit.adaptor.challenge import generate_challenge
from larkit.adaptor.custom import Dispatcher
from larkit.dispatcher.card import CardActionHandler

logger = logging.getLogger(__name__)


def create_router(
    path: str,
    dispatcher: Dispatcher,
    *,
    auto_challenge: bool = False,
) -> APIRouter:
    router = APIRouter(tags=["lark"])

    @router.post(path)
    async def receive_lark_callback(request: Request) -> Response:
        raw_body = await request.body()
        try:
            data = json.loads(raw_body) if raw_body else {}
        except json.JSONDecodeError:
            logger.warning(f"[lark-webhook] body of {path} is not JSON")
            data = {}
        if not isinstance(data, dict):
            data = {}

        if auto_challenge:
            is_challenge, challenge = generate_challenge(data, dispatcher.encrypt_key)
            if is_challenge:
                return JSONResponse(challenge)

        value = await dispatcher.invoke(data, headers=dict(request.headers), raw_body=raw_body)

        if isinstance(dispatcher, CardActionHandler) and value is not None:
            return JSONResponse(value)
        return Response(content="")

    return router
