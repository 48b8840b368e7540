"""Monthly invoice generation and payment marking.

Invoices are only ever created by :func:`generate_invoices`: one invoice per
company for the completed, not yet billed jobs created in a given month. The
run is a single transaction, so an allocated invoice number, the invoice row
and the job links are committed together or not at all.
"""
import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal

from flask import current_app

from .accounting import ZERO, format_invoice_number, month_bounds, to_decimal
from .errors import get_or_404
from .extensions import db
from .models import Invoice, Job, Settings

logger = logging.getLogger(__name__)


def jobs_for_month(month_year: str) -> list[Job]:
    """All jobs created in the calendar month ``month_year`` ("YYYY-MM")."""
    bounds = month_bounds(month_year)
    if bounds is None:
        return []
    start, end = bounds
    query = (
        db.select(Job)
        .where(Job.created_at >= start, Job.created_at < end)
        .order_by(Job.created_at, Job.id)
        .execution_options(populate_existing=True)
    )
    return list(db.session.execute(query).scalars())


def billable_jobs_by_company(jobs) -> dict[int, list[Job]]:
    grouped = defaultdict(list)
    for job in jobs:
        if job.status != 'done' or job.invoice_id is not None:
            continue
        if not job.company_id:
            continue
        grouped[job.company_id].append(job)
    return grouped


def allocate_invoice_number(settings: Settings, month_year: str) -> str:
    """Take the next number from the locked settings row."""
    number = settings.next_invoice_number or 1
    settings.next_invoice_number = number + 1
    db.session.flush()
    prefix = current_app.config.get('INVOICE_NUMBER_PREFIX', 'RE')
    return format_invoice_number(month_year, number, prefix)


def generate_invoices(month_year: str) -> list[Invoice]:
    created = []
    try:
        # the settings row lock serialises runs; jobs are read only once it is held
        settings = Settings.current(for_update=True)
        grouped = billable_jobs_by_company(jobs_for_month(month_year))
        for company_id in sorted(grouped):
            company_jobs = grouped[company_id]
            total = sum((to_decimal(j.referral_fee) for j in company_jobs), Decimal('0'))
            if total == ZERO:
                continue

            inv = Invoice(
                invoice_number=allocate_invoice_number(settings, month_year),
                date=datetime.utcnow(),
                month_year=month_year,
                company_id=company_id,
                total_amount=total,
                status='created',
            )
            db.session.add(inv)
            db.session.flush()

            for job in company_jobs:
                job.invoice_id = inv.id
            created.append(inv)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    for inv in created:
        logger.info("Created invoice %s for company %s (%s, total %s)",
                    inv.invoice_number, inv.company_id, month_year, inv.total_amount)
    if not created:
        logger.info("No billable jobs for %s", month_year)
    return created


def mark_paid(invoice_id: int, paid_at: datetime) -> Invoice:
    inv = get_or_404(Invoice, invoice_id)
    inv.status = 'paid'
    inv.paid_at = paid_at
    db.session.commit()
    logger.info("Invoice %s marked paid at %s", inv.invoice_number, paid_at.isoformat())
    return inv
