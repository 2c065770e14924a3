from flask import Blueprint, request

from ... import responses
from ... import users as user_store
from ...errors import ValidationError
from ...security import RequestContext, authenticated, is_valid_range

bp = Blueprint("users", __name__, url_prefix="/users")

MAX_PAGE_SIZE = 100


def _int_arg(name: str, default: int) -> int:
    value = request.args.get(name, type=int)
    return default if value is None else value


@bp.get("")
@authenticated(roles={"admin"})
def list_users(ctx: RequestContext):
    page = _int_arg("page", 0)
    limit = _int_arg("limit", 10)

    errors = []
    if not is_valid_range(page, 0):
        errors.append({"field": "page", "message": "must be 0 or greater"})
    if not is_valid_range(limit, 1, MAX_PAGE_SIZE):
        errors.append({"field": "limit", "message": f"must be between 1 and {MAX_PAGE_SIZE}"})
    if errors:
        raise ValidationError("Validation failed", errors)

    total = user_store.count_users()
    rows = user_store.list_users(limit=limit, offset=page * limit)
    return responses.paginated(
        [user_store.to_public(u) for u in rows], total, page, limit
    )
