from flask import Blueprint

from ... import responses
from ...security import RequestContext, authenticated

bp = Blueprint("settings", __name__, url_prefix="/settings")

# Studio equipment. Served statically until devices get their own table.
DEVICES = [
    {"id": "vacu-1", "name": "Vacuum Therapy 1", "type": "vacuum", "status": "active"},
    {"id": "vacu-2", "name": "Vacuum Therapy 2", "type": "vacuum", "status": "active"},
    {"id": "vacu-3", "name": "Vacuum Therapy 3", "type": "vacuum", "status": "maintenance"},
    {"id": "rf-1", "name": "RF Therapy 1", "type": "rf", "status": "active"},
    {"id": "rf-2", "name": "RF Therapy 2", "type": "rf", "status": "active"},
    {"id": "laser-1", "name": "Laser Therapy 1", "type": "laser", "status": "active"},
    {"id": "laser-2", "name": "Laser Therapy 2", "type": "laser", "status": "active"},
]


@bp.get("/devices")
@authenticated
def devices(ctx: RequestContext):
    return responses.success(DEVICES)
