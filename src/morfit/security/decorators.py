"""
Route guards.

Usage:
    from morfit.security import authenticated, optional_auth, RequestContext

    @authenticated                         # Any valid token
    def me(ctx: RequestContext):
        ...

    @authenticated(roles={"admin"})        # Role allow-set
    def list_users(ctx: RequestContext):
        ...

    @authenticated(permission="members:edit")
    def edit_member(ctx: RequestContext, member_id: str):
        ...

    @optional_auth                         # ctx is None when anonymous
    def report(ctx: RequestContext | None):
        ...

Failures short-circuit with the JSON failure envelope:
    401 no token, 403 invalid/expired token, 403 role or permission refused.
"""

import logging
import uuid
from functools import wraps
from typing import Callable, Collection, Optional, TypeVar, Union

from flask import g, request

from .. import responses
from ..errors import AppError, InsufficientAuthorizationError
from .authenticators import authenticate_request, extract_bearer_token, get_token_service
from .context import Identity, RequestContext, set_context
from .permissions import has_permission, has_role

F = TypeVar("F", bound=Callable)

log = logging.getLogger(__name__)


def _build_context(identity: Identity) -> RequestContext:
    """Create the immutable context and bind it to the request."""
    ctx = RequestContext(
        identity=identity,
        request_id=g.get("request_id", str(uuid.uuid4())),
        ip_address=request.remote_addr or "",
        user_agent=request.headers.get("User-Agent", "")[:1024],
    )
    set_context(ctx)
    return ctx


def _authorize(
    identity: Identity,
    roles: Optional[Collection[str]],
    permission: Optional[str],
) -> None:
    """Raise InsufficientAuthorizationError if role or permission is refused."""
    if roles is not None and not has_role(identity, roles):
        log.info(
            f"Role refused: user_id={identity.id} role={identity.role_id} "
            f"path={request.path}"
        )
        raise InsufficientAuthorizationError()

    if permission is not None and not has_permission(identity, permission):
        log.info(
            f"Permission refused: user_id={identity.id} permission={permission} "
            f"path={request.path}"
        )
        raise InsufficientAuthorizationError()


def authenticated(
    f: Optional[F] = None,
    *,
    roles: Optional[Collection[str]] = None,
    permission: Optional[str] = None,
) -> Union[F, Callable[[F], F]]:
    """
    Require a valid bearer token.

    Args:
        roles: Allowed role ids, or a single role id. None means any role.
        permission: Permission name checked with the installed PermissionChecker.

    The decorated function receives RequestContext as first argument.
    """
    if isinstance(roles, str):
        # One role id, not a collection of letters
        allowed_roles = frozenset({roles})
    elif roles is not None:
        allowed_roles = frozenset(roles)
    else:
        allowed_roles = None

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            # Step 1-2: Extract and verify
            try:
                identity = authenticate_request()
            except AppError as e:
                log.info(f"Authentication failed: {e.message} path={request.path}")
                return responses.from_exception(e)

            # Step 3: Authorize
            try:
                _authorize(identity, allowed_roles, permission)
            except AppError as e:
                return responses.from_exception(e)

            # Step 4: Create immutable context and proceed
            ctx = _build_context(identity)
            return func(ctx, *args, **kwargs)

        return wrapper

    if f is not None:
        return decorator(f)
    return decorator


def optional_auth(f: F) -> F:
    """
    Attach identity when a valid token is present; never reject.

    A missing or invalid token leaves the request anonymous and the
    decorated function receives None as first argument.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        ctx = None
        token = extract_bearer_token()
        if token is not None:
            try:
                ctx = _build_context(get_token_service().verify(token))
            except AppError as e:
                log.debug(f"Optional auth ignored token: {e.message}")
        return f(ctx, *args, **kwargs)

    return wrapper
