import logging

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from ..accounting import money_str
from ..auth import require_admin
from ..extensions import db
from ..models import Invoice, Job, Settings

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)


@main_bp.before_request
def guard():
    if request.endpoint == 'main.health':
        return None
    return require_admin()


@main_bp.get('/health')
def health():
    try:
        Settings.current()
        db.session.commit()
        ok = True
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Health check could not reach the database")
        ok = False
    return jsonify(ok=True, db=ok)


@main_bp.get('/dashboard')
def dashboard():
    unpaid = db.select(Invoice).where(Invoice.status != 'paid').subquery()
    stats = {
        'totalJobs': db.session.scalar(db.select(db.func.count(Job.id))),
        'openJobs': db.session.scalar(db.select(db.func.count(Job.id)).where(Job.status == 'open')),
        'totalFees': money_str(db.session.scalar(db.select(db.func.sum(Job.referral_fee)))),
        'unpaidCount': db.session.scalar(db.select(db.func.count()).select_from(unpaid)),
        'unpaidAmount': money_str(db.session.scalar(db.select(db.func.sum(unpaid.c.total_amount)))),
    }
    return jsonify(stats)
