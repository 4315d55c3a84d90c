"""
Parsing and signature checks for pushed events and card callbacks.

Two event schemas exist. v1 carries the type in `event.type`; v2 has a
`schema` field, a `header` (with `event_type`) and an `event` body. Both are
flattened into one dict with EVENT_TYPE_KEY set, so handlers see the same
shape regardless of version.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from collections.abc import Mapping
from typing import Any

from larkit.dispatcher.aes import AESCipher
from larkit.errors import EventDecryptError
from larkit.logger import LoggerProxy

EVENT_TYPE_KEY = "event_type"

TIMESTAMP_HEADER = "x-lark-request-timestamp"
NONCE_HEADER = "x-lark-request-nonce"
SIGNATURE_HEADER = "x-lark-signature"


def _body_text(data: Any, raw_body: str | bytes | None) -> str:
    if raw_body is not None:
        return raw_body.decode("utf-8") if isinstance(raw_body, bytes) else raw_body
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def _lower_keys(headers: Mapping[str, Any] | None) -> dict[str, str]:
    return {str(key).lower(): str(value) for key, value in (headers or {}).items()}


class RequestHandle:
    def __init__(
        self,
        *,
        encrypt_key: str = "",
        verification_token: str = "",
        logger: LoggerProxy | None = None,
    ):
        self.encrypt_key = encrypt_key
        self.verification_token = verification_token
        self.logger = logger or LoggerProxy()
        self.aes_cipher = AESCipher(encrypt_key) if encrypt_key else None

    def decrypt(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Replace an `encrypt` field by its decrypted content.

        Raises:
            EventDecryptError: If no Encrypt Key is configured or decryption fails
        """
        rest = dict(data)
        encrypted = rest.pop("encrypt", None)
        if not encrypted:
            return rest
        if self.aes_cipher is None:
            raise EventDecryptError("encrypted event received but no encrypt_key is configured")
        try:
            decrypted = json.loads(self.aes_cipher.decrypt(encrypted))
        except json.JSONDecodeError as e:
            raise EventDecryptError(f"decrypted event is not JSON: {e}") from e
        return {**decrypted, **rest}

    def parse(self, data: Mapping[str, Any] | None) -> dict[str, Any]:
        """Decrypt if needed and flatten a v1 or v2 event."""
        try:
            target = self.decrypt(data or {})
        except EventDecryptError as e:
            self.logger.error(f"parse encrypt data failed: {e}")
            return {}

        if "schema" in target:
            header = target.pop("header", None) or {}
            event = target.pop("event", None) or {}
            return {
                EVENT_TYPE_KEY: header.get("event_type"),
                **target,
                **header,
                **event,
            }

        event = target.pop("event", None) or {}
        return {
            EVENT_TYPE_KEY: event.get("type"),
            **event,
            **target,
        }

    def check_is_event_validated(
        self,
        data: Any,
        headers: Mapping[str, Any] | None,
        raw_body: str | bytes | None = None,
    ) -> bool:
        """Verify the SHA-256 signature of an event; always true without an Encrypt Key."""
        if not self.encrypt_key:
            return True
        h = _lower_keys(headers)
        content = (
            h.get(TIMESTAMP_HEADER, "")
            + h.get(NONCE_HEADER, "")
            + self.encrypt_key
            + _body_text(data, raw_body)
        )
        computed = hashlib.sha256(content.encode("utf-8")).hexdigest()
        return hmac.compare_digest(computed, h.get(SIGNATURE_HEADER, ""))

    def check_is_card_event_validated(
        self,
        data: Any,
        headers: Mapping[str, Any] | None,
        raw_body: str | bytes | None = None,
    ) -> bool:
        """Verify the SHA-1 signature of a card callback; always true without a Verification Token."""
        if not self.verification_token:
            return True
        h = _lower_keys(headers)
        content = (
            h.get(TIMESTAMP_HEADER, "")
            + h.get(NONCE_HEADER, "")
            + self.verification_token
            + _body_text(data, raw_body)
        )
        computed = hashlib.sha1(content.encode("utf-8")).hexdigest()
        return hmac.compare_digest(computed, h.get(SIGNATURE_HEADER, ""))
