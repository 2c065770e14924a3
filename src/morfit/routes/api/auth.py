"""Authentication API - login, staff registration, current identity."""

import logging

from flask import Blueprint, request
from pydantic import ValidationError as PydanticValidationError

from ... import responses
from ... import users as user_store
from ...errors import ValidationError
from ...schemas import LoginRequest, RegisterRequest
from ...security import (
    DUMMY_HASH,
    Identity,
    RequestContext,
    authenticated,
    hash_password,
    verify_password,
)
from ...security.authenticators import get_token_service

bp = Blueprint("auth", __name__, url_prefix="/auth")
log = logging.getLogger(__name__)

INVALID_LOGIN = "Invalid email or password"


def parse_body(model):
    """Validate the JSON body against a pydantic model or raise ValidationError."""
    try:
        return model.model_validate(request.get_json(silent=True) or {})
    except PydanticValidationError as e:
        raise ValidationError(
            "Validation failed",
            [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors(include_context=False)
            ],
        )


def _identity_for(user: dict) -> Identity:
    return Identity(
        id=user["id"],
        email=user["email"],
        role_id=user["roleId"],
        full_name=user["fullName"],
    )


def _session_payload(user: dict) -> dict:
    identity = _identity_for(user)
    return {
        "token": get_token_service().issue(identity),
        "user": user_store.to_public(user),
    }


@bp.post("/login")
def login():
    data = parse_body(LoginRequest)

    user = user_store.get_user_by_email(data.email)

    # Constant-time verification
    password_hash = user["password"] if user and user.get("password") else DUMMY_HASH
    password_valid = verify_password(data.password, password_hash)

    if not user or not user.get("isActive") or not password_valid:
        log.info("Login failed")
        return responses.error(INVALID_LOGIN, 401)

    user_store.touch_last_login(user["id"])
    log.info(f"User logged in: user_id={user['id'][:8]}...")
    return responses.success(_session_payload(user))


@bp.post("/register")
@authenticated(roles={"admin"})
def register(ctx: RequestContext):
    data = parse_body(RegisterRequest)

    if not user_store.role_exists(data.role_id):
        raise ValidationError(
            "Validation failed", [{"field": "roleId", "message": "Unknown role"}]
        )

    user = user_store.create_user(
        email=data.email,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        role_id=data.role_id,
    )

    log.info(
        f"User created: user_id={user['id'][:8]}... role={user['roleId']} "
        f"by={ctx.user_id[:8]}..."
    )
    return responses.success(_session_payload(user), status=201)


@bp.get("/me")
@authenticated
def me(ctx: RequestContext):
    return responses.success(ctx.identity.to_claims())
