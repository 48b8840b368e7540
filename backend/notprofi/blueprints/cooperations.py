from flask import Blueprint, jsonify

from ..auth import require_admin
from ..cooperations import toggle_cooperation
from ..extensions import db
from ..models import Cooperation
from ..schemas import CooperationOut, CooperationToggle, dump, load

cooperations_bp = Blueprint('cooperations', __name__)
cooperations_bp.before_request(require_admin)


@cooperations_bp.get('')
def list_cooperations():
    rows = db.session.execute(db.select(Cooperation).order_by(Cooperation.id)).scalars()
    return jsonify([dump(CooperationOut, c) for c in rows])


@cooperations_bp.post('')
def toggle():
    body = load(CooperationToggle)
    toggle_cooperation(body.company_id, body.property_manager_id, body.active)
    return jsonify(success=True)
