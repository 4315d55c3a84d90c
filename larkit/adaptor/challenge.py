"""
URL verification handshake.

When a request URL is configured in the developer console, the platform
posts `{"type": "url_verification", "challenge": "..."}` (possibly
encrypted) and expects the challenge echoed back.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from larkit.dispatcher.aes import AESCipher

URL_VERIFICATION = "url_verification"


def generate_challenge(data: Mapping[str, Any], encrypt_key: str = "") -> tuple[bool, dict[str, Any]]:
    """
    Detect a verification request and build its answer.

    Returns:
        (is_challenge, {"challenge": <value>})

    Raises:
        ValueError: If the body is encrypted but no Encrypt Key is configured
        EventDecryptError: If the body cannot be decrypted
    """
    if "encrypt" in data:
        if not encrypt_key:
            raise ValueError("auto-challenge need encryptKey, please check for missing in dispatcher")
        target = json.loads(AESCipher(encrypt_key).decrypt(data["encrypt"]))
    else:
        target = data

    return target.get("type") == URL_VERIFICATION, {"challenge": target.get("challenge")}
