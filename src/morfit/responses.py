"""
JSON response envelopes.

Success:   {"success": true, "data": ..., "meta": {"timestamp": ...}}
Paginated: same, with totalCount/page/limit/totalPages/hasNextPage/hasPrevPage in meta
Failure:   {"success": false, "error": "...", "timestamp": ...}
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional

from flask import g, jsonify

from .errors import AppError, ValidationError


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _meta(**extra) -> dict:
    meta = {"timestamp": _timestamp()}
    request_id = g.get("request_id")
    if request_id:
        meta["requestId"] = request_id
    meta.update(extra)
    return meta


def success(data: Any = None, status: int = 200):
    """Wrap data in the success envelope."""
    return jsonify({"success": True, "data": data, "meta": _meta()}), status


def paginated(items: list, total_count: int, page: int, limit: int):
    """
    Wrap one page of items. Pages are zero-based.

    Args:
        items: Items on this page
        total_count: Items across all pages
        page: Zero-based page index
        limit: Page size (must be positive)
    """
    total_pages = math.ceil(total_count / limit) if limit else 0
    return jsonify(
        {
            "success": True,
            "data": items,
            "meta": _meta(
                totalCount=total_count,
                page=page,
                limit=limit,
                totalPages=total_pages,
                hasNextPage=page < total_pages - 1,
                hasPrevPage=page > 0,
            ),
        }
    )


def error(message: str, status: int, details: Optional[Any] = None):
    """Failure envelope. Never include stack traces or internal detail."""
    body = {"success": False, "error": message, "timestamp": _timestamp()}
    if details is not None:
        body["details"] = details
    return jsonify(body), status


def from_exception(e: AppError):
    """Failure envelope for an AppError."""
    if isinstance(e, ValidationError):
        return error(e.message, e.status_code, e.errors)
    if not e.is_operational or e.status_code >= 500:
        # Server-side failures keep their detail in the logs
        return error("Internal server error", e.status_code)
    return error(e.message, e.status_code)
