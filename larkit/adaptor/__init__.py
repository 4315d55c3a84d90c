"""
Adaptors that connect web frameworks to the dispatchers.
"""

from larkit.adaptor.challenge import generate_challenge
from larkit.adaptor.custom import adapt_custom
from larkit.adaptor.fastapi_router import create_router

__all__ = [
    "adapt_custom",
    "create_router",
    "generate_challenge",
]
