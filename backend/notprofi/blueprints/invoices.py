from flask import Blueprint, jsonify, make_response, request
from sqlalchemy.orm import selectinload

from ..auth import require_admin
from ..errors import NotFound
from ..extensions import db
from ..invoicing import generate_invoices, mark_paid
from ..models import Invoice, Job, Settings
from ..pdf import render_invoice_pdf
from ..schemas import (
    GenerateInvoices,
    InvoiceListOut,
    InvoiceOut,
    PayInvoice,
    check_filter,
    dump,
    invoice_status_adapter,
    load,
)

invoices_bp = Blueprint('invoices', __name__)
invoices_bp.before_request(require_admin)


@invoices_bp.get('')
def list_invoices():
    query = db.select(Invoice).options(selectinload(Invoice.company))
    status = request.args.get('status')
    if status:
        query = query.where(Invoice.status == check_filter(invoice_status_adapter, status, 'status'))
    month_year = request.args.get('monthYear')
    if month_year:
        query = query.where(Invoice.month_year == month_year)
    rows = db.session.execute(query.order_by(Invoice.date.desc(), Invoice.id.desc())).scalars()
    return jsonify([dump(InvoiceListOut, inv) for inv in rows])


@invoices_bp.post('/generate')
def generate():
    created = generate_invoices(load(GenerateInvoices).month_year)
    return jsonify([dump(InvoiceOut, inv) for inv in created]), 201


@invoices_bp.patch('/<int:invoice_id>/pay')
def pay(invoice_id):
    body = load(PayInvoice)
    return jsonify(dump(InvoiceOut, mark_paid(invoice_id, body.paid_at)))


@invoices_bp.get('/<int:invoice_id>/pdf')
def invoice_pdf(invoice_id):
    # settings first: the commit would expire the eagerly loaded invoice
    settings = Settings.current()
    db.session.commit()
    inv = db.session.execute(
        db.select(Invoice)
        .options(selectinload(Invoice.company),
                 selectinload(Invoice.jobs).selectinload(Job.property_manager))
        .where(Invoice.id == invoice_id)
    ).scalar_one_or_none()
    if inv is None:
        raise NotFound()
    resp = make_response(render_invoice_pdf(inv, settings))
    resp.headers['Content-Type'] = 'application/pdf'
    resp.headers['Content-Disposition'] = f'attachment; filename="{inv.invoice_number}.pdf"'
    return resp
