"""
AES decryption of encrypted event bodies.

When an app sets an Encrypt Key, event bodies arrive as `{"encrypt": "<b64>"}`
where the base64 blob is a 16-byte IV followed by AES-256-CBC ciphertext
(PKCS#7 padded). The AES key is SHA-256 of the Encrypt Key.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from larkit.errors import EventDecryptError

BLOCK_SIZE_BITS = 128
IV_SIZE = 16


class AESCipher:
    def __init__(self, key: str):
        self.key = hashlib.sha256(key.encode("utf-8")).digest()

    def decrypt(self, encrypted: str) -> str:
        """
        Decrypt a base64 event blob to its JSON text.

        Raises:
            EventDecryptError: On bad base64, bad padding or non-UTF-8 plaintext
        """
        try:
            blob = base64.b64decode(encrypted)
            iv, ciphertext = blob[:IV_SIZE], blob[IV_SIZE:]
            decryptor = Cipher(algorithms.AES(self.key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
            return plaintext.decode("utf-8")
        except (binascii.Error, ValueError) as e:
            raise EventDecryptError(f"decrypt event failed: {e}") from e

    def encrypt(self, plaintext: str, iv: bytes | None = None) -> str:
        """Encrypt text into the same blob format the platform sends."""
        iv = iv or os.urandom(IV_SIZE)
        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self.key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(iv + ciphertext).decode("ascii")
