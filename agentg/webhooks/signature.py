"""GitHub webhook signature verification (X-Hub-Signature-256)."""

import hashlib
import hmac


def compute_signature(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def verify_signature(body: bytes, signature: str | None, secret: str | None) -> bool:
    """
    Check a delivery's signature header against the shared secret.

    A missing signature or secret never verifies. The comparison is
    constant time.
    """
    if not signature or not secret:
        return False
    expected = compute_signature(body, secret)
    return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))
