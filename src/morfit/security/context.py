"""
Request context - single source of truth for authentication state.

Usage:
    from morfit.security import get_context, RequestContext

    def my_route(ctx: RequestContext):
        print(ctx.identity.id)       # Subject from the verified token
        print(ctx.identity.role_id)  # Role used by role checks
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from flask import g, has_request_context


@dataclass(frozen=True)
class Identity:
    """Claims carried by a signed token. Never mutated once issued."""

    id: str
    email: str
    role_id: str
    full_name: str

    def to_claims(self) -> dict:
        """Wire form used inside tokens and JSON responses."""
        return {
            "id": self.id,
            "email": self.email,
            "roleId": self.role_id,
            "fullName": self.full_name,
        }

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Identity":
        """
        Build from token claims.

        Raises KeyError if a claim is missing, ValueError if one is not a string.
        """
        values = {
            "id": claims["id"],
            "email": claims["email"],
            "role_id": claims["roleId"],
            "full_name": claims["fullName"],
        }
        for name, value in values.items():
            if not isinstance(value, str):
                raise ValueError(f"claim {name} must be a string")
        return cls(**values)


@dataclass(frozen=True)
class RequestContext:
    """
    Immutable request context. Single source of truth.

    Created once by the route guard, never mutated.
    Access via get_context() or as first argument to @authenticated routes.
    """

    identity: Identity

    # Request metadata
    request_id: str = ""
    ip_address: str = ""
    user_agent: str = ""

    @property
    def user_id(self) -> str:
        return self.identity.id

    @property
    def role_id(self) -> str:
        return self.identity.role_id


def get_context() -> Optional[RequestContext]:
    """Get current request context. Returns None if not authenticated."""
    if not has_request_context():
        return None
    return getattr(g, "_security_context", None)


def set_context(ctx: RequestContext) -> None:
    """
    Set context for current request. Internal use only.

    Raises RuntimeError if context already set (prevents mutation).
    """
    if getattr(g, "_security_context", None) is not None:
        raise RuntimeError("Security context already set for this request")
    g._security_context = ctx


def clear_context(exc: Optional[BaseException] = None) -> None:
    """Clear context. Called in request teardown."""
    if has_request_context() and hasattr(g, "_security_context"):
        g._security_context = None
