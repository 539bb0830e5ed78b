"""Signature checks for both init data schemes.

HMAC-SHA256 with a secret derived from the bot token, or Ed25519 against
Telegram's public key ("third-party validation"). Pure functions, no I/O.
"""

import base64
import binascii
import hashlib
import hmac
import re

from nacl.exceptions import CryptoError
from nacl.signing import VerifyKey

from .keys import WEB_APP_DATA

_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]*=*")


def compute_hmac(bot_token: str, data_check_string: str) -> str:
    """Compute the hex HMAC-SHA256 of a data-check-string.

    The secret key is HMAC-SHA256("WebAppData", bot_token).
    """
    secret_key = hmac.new(
        WEB_APP_DATA, bot_token.encode(), hashlib.sha256,
    ).digest()
    return hmac.new(
        secret_key, data_check_string.encode(), hashlib.sha256,
    ).hexdigest()


def verify_hmac_hash(bot_token: str, data_check_string: str, received_hash: str) -> bool:
    expected = compute_hmac(bot_token, data_check_string)
    # Compared as bytes so non-ASCII input is a mismatch rather than a TypeError
    return hmac.compare_digest(expected.encode(), received_hash.encode())


def decode_signature(signature: str) -> bytes:
    """Decode URL-safe base64 with optional padding.

    Raises binascii.Error on characters outside the URL-safe alphabet,
    including the standard alphabet's ``+`` and ``/``.
    """
    if not _BASE64URL_RE.fullmatch(signature):
        raise binascii.Error(f"not URL-safe base64: {signature!r}")
    padded = signature + "=" * (-len(signature) % 4)
    return base64.b64decode(padded, altchars=b"-_", validate=True)


def verify_ed25519_signature(message: str, signature: str, public_key: VerifyKey) -> bool:
    """Check a base64url Ed25519 signature over the UTF-8 message."""
    try:
        public_key.verify(message.encode(), decode_signature(signature))
    except (binascii.Error, CryptoError, ValueError):
        return False
    return True
