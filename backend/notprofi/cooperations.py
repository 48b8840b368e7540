import logging

from sqlalchemy.exc import IntegrityError

from .errors import Conflict, get_or_404
from .extensions import db
from .models import Company, Cooperation, PropertyManager

logger = logging.getLogger(__name__)


def find_cooperation(company_id: int, property_manager_id: int):
    return db.session.execute(
        db.select(Cooperation).filter_by(company_id=company_id,
                                         property_manager_id=property_manager_id)
    ).scalar_one_or_none()


def toggle_cooperation(company_id: int, property_manager_id: int, active: bool | None = None) -> bool:
    """Flip the link between a company and a property manager.

    With ``active`` given, the link is set to that state instead of flipped.
    Returns whether the pair cooperates afterwards.
    """
    get_or_404(Company, company_id)
    get_or_404(PropertyManager, property_manager_id)

    existing = find_cooperation(company_id, property_manager_id)
    want = existing is None if active is None else active

    if want and existing is None:
        db.session.add(Cooperation(company_id=company_id, property_manager_id=property_manager_id))
    elif not want and existing is not None:
        db.session.delete(existing)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict('Cooperation was changed concurrently')

    logger.info("Cooperation company=%s property_manager=%s %s",
                company_id, property_manager_id, 'active' if want else 'removed')
    return want
