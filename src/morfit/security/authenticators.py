"""
Bearer token authentication (Authorization: Bearer <token>).
"""

import logging
from typing import Optional

from flask import current_app, request

from ..errors import MissingCredentialError
from .context import Identity
from .tokens import TokenService

log = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token() -> Optional[str]:
    """Token from the Authorization header, or None if absent or not Bearer."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(BEARER_PREFIX):
        return None
    return auth_header[len(BEARER_PREFIX):].strip() or None


def get_token_service() -> TokenService:
    """The TokenService built by create_app() for this application."""
    return current_app.extensions["morfit.tokens"]


def authenticate_request() -> Identity:
    """
    Authenticate the current request.

    Raises:
        MissingCredentialError: No bearer token on the request.
        InvalidCredentialError: Token present but fails verification.
    """
    token = extract_bearer_token()
    if token is None:
        raise MissingCredentialError()
    return get_token_service().verify(token)
