from flask import Blueprint, jsonify, make_response, request
from sqlalchemy.orm import selectinload

from ..auth import require_admin
from ..errors import ValidationFailure, get_or_404
from ..extensions import db
from ..jobs import create_job, create_or_update_job_report, update_job
from ..models import Company, Job, PropertyManager, Settings
from ..pdf import render_job_pdf
from ..schemas import (
    JobCreate,
    JobDetailOut,
    JobListOut,
    JobOut,
    JobReportOut,
    JobReportUpsert,
    JobUpdate,
    changes,
    check_filter,
    dump,
    job_status_adapter,
    load,
)

jobs_bp = Blueprint('jobs', __name__)
jobs_bp.before_request(require_admin)


def _check_references(values):
    for attr, model, key in (('company_id', Company, 'companyId'),
                             ('property_manager_id', PropertyManager, 'propertyManagerId')):
        ident = values.get(attr)
        if ident is not None and db.session.get(model, ident) is None:
            raise ValidationFailure(f'{key} does not exist', field=key)


@jobs_bp.get('')
def list_jobs():
    query = db.select(Job).options(selectinload(Job.company), selectinload(Job.property_manager))
    status = request.args.get('status')
    if status:
        query = query.where(Job.status == check_filter(job_status_adapter, status, 'status'))
    rows = db.session.execute(query.order_by(Job.created_at.desc(), Job.id.desc())).scalars()
    return jsonify([dump(JobListOut, j) for j in rows])


@jobs_bp.get('/<int:job_id>')
def get_job(job_id):
    return jsonify(dump(JobDetailOut, get_or_404(Job, job_id)))


@jobs_bp.post('')
def create():
    values = changes(load(JobCreate))
    _check_references(values)
    job = create_job(values)
    return jsonify(dump(JobOut, job)), 201


@jobs_bp.put('/<int:job_id>')
def update(job_id):
    job = get_or_404(Job, job_id)
    values = changes(load(JobUpdate))
    _check_references(values)
    return jsonify(dump(JobOut, update_job(job, values)))


@jobs_bp.post('/<int:job_id>/report')
def save_report(job_id):
    job = get_or_404(Job, job_id)
    values = changes(load(JobReportUpsert))
    return jsonify(dump(JobReportOut, create_or_update_job_report(job, values)))


@jobs_bp.get('/<int:job_id>/pdf')
def job_pdf(job_id):
    job = get_or_404(Job, job_id)
    settings = Settings.current()
    db.session.commit()
    resp = make_response(render_job_pdf(job, settings))
    resp.headers['Content-Type'] = 'application/pdf'
    resp.headers['Content-Disposition'] = f'attachment; filename="{job.job_number}.pdf"'
    return resp
