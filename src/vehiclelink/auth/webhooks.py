"""Helpers for receiving provider webhooks."""

from __future__ import annotations

import hashlib
import hmac


def hash_challenge(management_token: str, challenge: str) -> str:
    """Return the hex HMAC-SHA256 of *challenge* keyed by the management token.

    Used both to answer the verification challenge when a webhook is first
    registered and to compute the expected signature of delivered payloads.
    """
    digest = hmac.new(
        management_token.encode("utf-8"), challenge.encode("utf-8"), hashlib.sha256
    )
    return digest.hexdigest()


def verify_payload(management_token: str, signature: str, body: str) -> bool:
    """Check the ``SC-Signature`` header of a webhook delivery against *body*."""
    expected = hash_challenge(management_token, body)
    return hmac.compare_digest(expected, signature.strip().lower())
