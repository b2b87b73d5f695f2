"""
Token authentication for API clients.

Kept apart from the views so REST framework can import it from settings
without pulling in view modules.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """``Authorization: Token <key>``; the key is issued at login."""

    keyword = 'Token'
