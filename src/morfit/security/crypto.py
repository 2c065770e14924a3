"""
Cryptographic utilities.

- Password hashing (bcrypt, cost 12)
- Random tokens, UUIDs and integers (secrets)
- SHA-256 fingerprints and HMAC-SHA256 signatures
- AES-256-GCM encryption with "iv:ciphertext:tag" hex framing
"""

import hashlib
import hmac
import logging
import math
import secrets
import uuid

import bcrypt
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import ConfigurationError, CryptoIntegrityError, PayloadFormatError

log = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12

KEY_SIZE = 32
IV_SIZE = 16
TAG_SIZE = 16


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt and a fresh salt.

    Raises ValueError for passwords longer than bcrypt's 72-byte limit.
    """
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    ).decode("ascii")


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against stored hash. Returns False on mismatch."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash, or a password over the 72-byte limit
        return False


# Pre-computed hash for timing-attack prevention on login
# Used when user doesn't exist to ensure constant-time response
DUMMY_HASH = hash_password("dummy-password-for-timing-attack-prevention")


def generate_token(length: int = 32) -> str:
    """Random token of `length` bytes, hex encoded (2 * length characters)."""
    return secrets.token_hex(length)


def generate_uuid() -> str:
    return str(uuid.uuid4())


def hash_data(data: str) -> str:
    """SHA-256 hex digest. For fingerprinting, not for passwords."""
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def create_hmac(data: str, secret: str) -> str:
    """HMAC-SHA256 hex digest of data under secret."""
    return hmac.new(
        secret.encode("utf-8"), data.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def generate_random_number(minimum: int, maximum: int) -> int:
    """
    Secure random integer in [minimum, maximum).

    Caller must pass maximum > minimum; equal bounds always return minimum.
    """
    span = maximum - minimum
    fraction = int.from_bytes(secrets.token_bytes(4), "big") / 0xFFFFFFFF
    result = math.floor(fraction * span) + minimum
    # fraction is exactly 1.0 for the all-ones draw
    if span > 0 and result >= maximum:
        result = maximum - 1
    return result


def _key_bytes(key: str | bytes) -> bytes:
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    if len(raw) != KEY_SIZE:
        raise ConfigurationError(f"encryption key (expected {KEY_SIZE} bytes, got {len(raw)})")
    return raw


def encrypt(text: str, key: str | bytes) -> str:
    """
    Encrypt text with AES-256-GCM.

    Args:
        text: Plaintext (UTF-8)
        key: Exactly 32 bytes; str keys are UTF-8 encoded

    Returns:
        "<iv hex>:<ciphertext hex>:<tag hex>", with a fresh 16-byte IV per call

    Raises:
        ConfigurationError: key is not 32 bytes
    """
    aesgcm = AESGCM(_key_bytes(key))
    iv = secrets.token_bytes(IV_SIZE)
    sealed = aesgcm.encrypt(iv, text.encode("utf-8"), None)
    ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
    return f"{iv.hex()}:{ciphertext.hex()}:{tag.hex()}"


def decrypt(payload: str, key: str | bytes) -> str:
    """
    Decrypt a payload produced by encrypt().

    Raises:
        ConfigurationError: key is not 32 bytes
        PayloadFormatError: payload is not three hex parts of the right sizes
        CryptoIntegrityError: authentication tag does not verify
    """
    aesgcm = AESGCM(_key_bytes(key))

    parts = payload.split(":") if isinstance(payload, str) else []
    if len(parts) != 3:
        raise PayloadFormatError("Encrypted payload must have exactly three parts")

    try:
        iv, ciphertext, tag = (bytes.fromhex(part) for part in parts)
    except ValueError:
        raise PayloadFormatError("Encrypted payload is not valid hex")

    if len(iv) != IV_SIZE or len(tag) != TAG_SIZE:
        raise PayloadFormatError("Encrypted payload has a bad IV or tag length")

    try:
        plaintext = aesgcm.decrypt(iv, ciphertext + tag, None)
    except InvalidTag:
        log.warning("Decryption failed: authentication tag mismatch")
        raise CryptoIntegrityError("Authentication tag mismatch")

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError:
        raise PayloadFormatError("Decrypted payload is not UTF-8 text")
