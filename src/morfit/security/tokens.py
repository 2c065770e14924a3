"""
Signed identity tokens (HS256 JWT).

The signing secret comes from Config and is handed to TokenService once at
startup; nothing here reads the environment.

Usage:
    tokens = TokenService.from_config(config)
    token = tokens.issue(Identity("u1", "a@b.com", "admin", "A B"))
    identity = tokens.verify(token)
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt as pyjwt
from jwt.utils import base64url_decode, base64url_encode

from ..config import Config
from ..errors import ConfigurationError, InvalidCredentialError, MissingCredentialError
from .context import Identity

log = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)

_REQUIRED_CLAIMS = ["exp", "iat", "sub", "id", "email", "roleId", "fullName"]


def _is_canonical(token: str) -> bool:
    """
    True if every segment re-encodes to itself.

    base64url decoding ignores the spare bits of a segment's last character,
    so two different strings can decode to the same signed bytes.
    """
    segments = token.split(".")
    if len(segments) != 3:
        return False
    try:
        return all(
            base64url_encode(base64url_decode(s)).decode() == s for s in segments
        )
    except ValueError:
        return False


class TokenService:
    """Issues and verifies tokens with a fixed validity window."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        algorithm: str = "HS256",
    ) -> None:
        if not secret:
            raise ConfigurationError("JWT_SECRET")
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config: Config) -> TokenService:
        return cls(config.jwt_secret, ttl=config.token_ttl)

    def issue(self, identity: Identity, now: datetime | None = None) -> str:
        """
        Sign the identity's claims.

        Args:
            identity: Claims to embed
            now: Issuance time (defaults to current UTC time)

        Returns:
            Compact JWT expiring `ttl` after issuance.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            **identity.to_claims(),
            "sub": identity.id,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return pyjwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> Identity:
        """
        Verify signature and expiry, and return the embedded identity.

        Raises:
            MissingCredentialError: No token given.
            InvalidCredentialError: Bad signature, expired, malformed, or
                missing claims. All of these are reported the same way.
        """
        if not token:
            raise MissingCredentialError()

        if not _is_canonical(token):
            log.info("Token rejected: non-canonical encoding")
            raise InvalidCredentialError()

        try:
            payload = pyjwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
            identity = Identity.from_claims(payload)
        except pyjwt.ExpiredSignatureError:
            log.info("Token rejected: expired")
            raise InvalidCredentialError()
        except pyjwt.InvalidTokenError as e:
            log.info(f"Token rejected: {type(e).__name__}")
            raise InvalidCredentialError()
        except (KeyError, ValueError) as e:
            log.info(f"Token rejected: bad claims ({e})")
            raise InvalidCredentialError()

        if payload["sub"] != identity.id:
            log.info("Token rejected: subject does not match id claim")
            raise InvalidCredentialError()

        return identity
