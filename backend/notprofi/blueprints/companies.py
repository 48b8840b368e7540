from flask import Blueprint, jsonify, request

from ..auth import require_admin
from ..errors import Conflict, get_or_404
from ..extensions import db
from ..models import Company, Invoice, Job
from ..schemas import CompanyCreate, CompanyOut, CompanyUpdate, changes, dump, load

companies_bp = Blueprint('companies', __name__)
companies_bp.before_request(require_admin)


@companies_bp.get('')
def list_companies():
    q = request.args.get('q')
    query = db.select(Company)
    if q:
        query = query.where(Company.name.ilike(f"%{q}%") | Company.email.ilike(f"%{q}%"))
    rows = db.session.execute(query.order_by(Company.created_at.desc(), Company.id.desc())).scalars()
    return jsonify([dump(CompanyOut, c) for c in rows])


@companies_bp.get('/<int:company_id>')
def get_company(company_id):
    return jsonify(dump(CompanyOut, get_or_404(Company, company_id)))


@companies_bp.post('')
def create_company():
    c = Company(**changes(load(CompanyCreate)))
    db.session.add(c)
    db.session.commit()
    return jsonify(dump(CompanyOut, c)), 201


@companies_bp.put('/<int:company_id>')
def update_company(company_id):
    c = get_or_404(Company, company_id)
    for attr, value in changes(load(CompanyUpdate)).items():
        setattr(c, attr, value)
    db.session.commit()
    return jsonify(dump(CompanyOut, c))


@companies_bp.delete('/<int:company_id>')
def delete_company(company_id):
    c = get_or_404(Company, company_id)
    for model in (Job, Invoice):
        if db.session.execute(db.select(model.id).where(model.company_id == c.id).limit(1)).first():
            raise Conflict('Company still has jobs or invoices')
    db.session.delete(c)
    db.session.commit()
    return '', 204
