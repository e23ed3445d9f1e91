# cryptic_chest/app/security/encryption.py
"""
Credential envelope used for every stored password.

Wire format:  <base64(plaintext)>.<first 8 chars of base64(key)>

This is reversible encoding, NOT encryption:
- No confidentiality against anyone who can compute the key
- The 8-char key-check is the only integrity signal and is forgeable
- Kept as-is so stored records stay readable by existing clients
"""
import base64
import binascii
import logging
import secrets

from cryptic_chest.app.core.config import settings
from cryptic_chest.app.core.exceptions import FormatError, KeyMismatchError

logger = logging.getLogger(__name__)

SEPARATOR = "."
KEY_CHECK_LENGTH = 8


def _b64encode_text(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def key_check(key: str) -> str:
    """Return the 8-char key-check segment for a key."""
    return _b64encode_text(key)[:KEY_CHECK_LENGTH]


def constant_time_compare(a: str, b: str) -> bool:
    """Compare two check segments without leaking timing information."""
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def derive_user_key(user_id: str) -> str:
    """
    Derive the per-user envelope key.

    Anyone who knows the user id and the namespace can recompute this
    value; it is never persisted.

    Args:
        user_id: Owner identity

    Returns:
        Key string "<namespace>_<user_id>_key"
    """
    return f"{settings.KEY_NAMESPACE}_{user_id}_key"


def encrypt(plaintext: str, key: str) -> str:
    """
    Encode a secret under a key.

    Args:
        plaintext: The secret to store
        key: Derived user key

    Returns:
        Two-segment ciphertext joined with "."
    """
    return f"{_b64encode_text(plaintext)}{SEPARATOR}{key_check(key)}"


def decrypt(ciphertext: str, key: str) -> str:
    """
    Decode a ciphertext produced by encrypt().

    Args:
        ciphertext: Two-segment ciphertext
        key: Derived user key

    Returns:
        The original plaintext

    Raises:
        FormatError: ciphertext is not exactly two segments, or the
            payload is not valid base64 / UTF-8
        KeyMismatchError: key-check segment disagrees with key
    """
    parts = ciphertext.split(SEPARATOR)
    if len(parts) != 2:
        logger.warning("Rejected ciphertext with %d segments", len(parts))
        raise FormatError("Invalid encrypted data format", operation="decrypt")

    encoded_data, check = parts
    if not constant_time_compare(key_check(key), check):
        logger.warning("Key-check mismatch while decrypting credential")
        raise KeyMismatchError("Invalid decryption key", operation="decrypt")

    try:
        return base64.b64decode(encoded_data, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise FormatError("Encrypted payload is not valid base64 text", operation="decrypt") from exc
