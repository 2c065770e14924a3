"""
Security module - authentication, authorization, crypto and validation.

Usage:
    from morfit.security import authenticated, RequestContext

    @authenticated(roles={"admin", "staff"})
    def my_route(ctx: RequestContext):
        # ctx.identity is the verified token subject
        ...
"""

# Context types
from .context import (
    Identity,
    RequestContext,
    clear_context,
    get_context,
    set_context,
)

# Crypto utilities
from .crypto import (
    DUMMY_HASH,
    create_hmac,
    decrypt,
    encrypt,
    generate_random_number,
    generate_token,
    generate_uuid,
    hash_data,
    hash_password,
    verify_password,
)

# Decorators
from .decorators import authenticated, optional_auth

# Permissions
from .permissions import (
    PermissionChecker,
    allow_all,
    has_permission,
    has_role,
    set_permission_checker,
)

# Tokens
from .tokens import TokenService

# Validators
from .validators import (
    is_valid_email,
    is_valid_enum,
    is_valid_length,
    is_valid_range,
    is_valid_turkish_id,
    is_valid_turkish_phone,
    is_valid_url,
    is_valid_uuid,
    sanitize_email,
    sanitize_string,
)

__all__ = [
    # Context
    "Identity",
    "RequestContext",
    "get_context",
    "set_context",
    "clear_context",
    # Decorators
    "authenticated",
    "optional_auth",
    # Permissions
    "PermissionChecker",
    "allow_all",
    "has_permission",
    "has_role",
    "set_permission_checker",
    # Tokens
    "TokenService",
    # Crypto
    "hash_password",
    "verify_password",
    "generate_token",
    "generate_uuid",
    "hash_data",
    "create_hmac",
    "generate_random_number",
    "encrypt",
    "decrypt",
    "DUMMY_HASH",
    # Validators
    "is_valid_email",
    "is_valid_turkish_phone",
    "is_valid_uuid",
    "is_valid_url",
    "is_valid_turkish_id",
    "is_valid_length",
    "is_valid_range",
    "is_valid_enum",
    "sanitize_string",
    "sanitize_email",
]
