"""Utility functions for public share links."""

import secrets

SHARE_TOKEN_BYTES = 24


def generate_share_token() -> str:
    """Mint an unguessable URL-safe token (192 bits of randomness)."""
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)


def build_share_url(frontend_url: str, share_token: str | None) -> str | None:
    if not share_token:
        return None
    return f"{frontend_url.rstrip('/')}/trip/share/{share_token}"
