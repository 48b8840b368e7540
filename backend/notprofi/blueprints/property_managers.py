from flask import Blueprint, jsonify, request

from ..auth import require_admin
from ..errors import Conflict, get_or_404
from ..extensions import db
from ..models import Job, PropertyManager
from ..schemas import PropertyManagerCreate, PropertyManagerOut, PropertyManagerUpdate, changes, dump, load

property_managers_bp = Blueprint('property_managers', __name__)
property_managers_bp.before_request(require_admin)


@property_managers_bp.get('')
def list_property_managers():
    q = request.args.get('q')
    query = db.select(PropertyManager)
    if q:
        query = query.where(PropertyManager.name.ilike(f"%{q}%") | PropertyManager.email.ilike(f"%{q}%"))
    rows = db.session.execute(
        query.order_by(PropertyManager.created_at.desc(), PropertyManager.id.desc())
    ).scalars()
    return jsonify([dump(PropertyManagerOut, pm) for pm in rows])


@property_managers_bp.get('/<int:pm_id>')
def get_property_manager(pm_id):
    return jsonify(dump(PropertyManagerOut, get_or_404(PropertyManager, pm_id)))


@property_managers_bp.post('')
def create_property_manager():
    pm = PropertyManager(**changes(load(PropertyManagerCreate)))
    db.session.add(pm)
    db.session.commit()
    return jsonify(dump(PropertyManagerOut, pm)), 201


@property_managers_bp.put('/<int:pm_id>')
def update_property_manager(pm_id):
    pm = get_or_404(PropertyManager, pm_id)
    for attr, value in changes(load(PropertyManagerUpdate)).items():
        setattr(pm, attr, value)
    db.session.commit()
    return jsonify(dump(PropertyManagerOut, pm))


@property_managers_bp.delete('/<int:pm_id>')
def delete_property_manager(pm_id):
    pm = get_or_404(PropertyManager, pm_id)
    if db.session.execute(db.select(Job.id).where(Job.property_manager_id == pm.id).limit(1)).first():
        raise Conflict('Property manager still has jobs')
    db.session.delete(pm)
    db.session.commit()
    return '', 204
