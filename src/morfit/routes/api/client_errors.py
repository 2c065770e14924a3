"""Client-side error reports. Works with or without a token."""

import logging

from flask import Blueprint

from ... import responses
from ...schemas import ClientErrorReport
from ...security import RequestContext, optional_auth
from .auth import parse_body

bp = Blueprint("client_errors", __name__, url_prefix="/client-errors")
log = logging.getLogger(__name__)


@bp.post("")
@optional_auth
def report(ctx: RequestContext | None):
    data = parse_body(ClientErrorReport)
    user_id = ctx.user_id if ctx else "anonymous"
    log.error(
        f"Client error: user_id={user_id} url={data.url} "
        f"message={data.message[:200]!r}"
    )
    if data.stack:
        log.debug(f"Client error stack: {data.stack}")
    return responses.success(None)
