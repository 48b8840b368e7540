import io

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from .accounting import format_money

LEFT = 50
TOP = 800
BOTTOM = 80


def _date(dt):
    return dt.strftime('%d.%m.%Y') if dt else '-'


def _contact(obj):
    if obj is None:
        return '-'
    text = f"{(obj.phone or '').strip()} {(obj.email or '').strip()}".strip()
    return text or '-'


class PdfWriter:
    """Line-by-line text layout on A4 pages, top to bottom."""

    def __init__(self, title):
        self.buffer = io.BytesIO()
        self.canvas = canvas.Canvas(self.buffer, pagesize=A4)
        self.canvas.setTitle(title)
        self.y = TOP

    def line(self, text, size=11, indent=0, gap=None):
        if self.y < BOTTOM:
            self.canvas.showPage()
            self.y = TOP
        self.canvas.setFont('Helvetica', size)
        self.canvas.drawString(LEFT + indent, self.y, text)
        self.y -= gap if gap is not None else size + 3

    def skip(self, amount):
        self.y -= amount

    def header(self, settings):
        self.line(settings.company_name, size=18, gap=18)
        self.line(settings.address or '', size=10, gap=12)
        self.line(f"{settings.email or ''}  |  {settings.website or ''}".strip(), size=10, gap=24)

    def finish(self) -> bytes:
        self.canvas.showPage()
        self.canvas.save()
        return self.buffer.getvalue()


def render_job_pdf(job, settings) -> bytes:
    pdf = PdfWriter(job.job_number)
    pdf.header(settings)

    pdf.line("Auftragsblatt / Einsatzprotokoll", size=14, gap=18)
    pdf.line(f"Auftragsnummer: {job.job_number}", gap=14)
    created = job.created_at.strftime('%d.%m.%Y %H:%M') if job.created_at else '-'
    pdf.line(f"Erstellt: {created}", gap=20)

    pm = job.property_manager
    pdf.line(f"Hausverwaltung: {pm.name if pm else '-'}", gap=14)
    pdf.line(f"HV Adresse: {pm.address if pm else '-'}", gap=14)
    pdf.line(f"HV Kontakt: {_contact(pm)}", gap=20)

    company = job.company
    pdf.line(f"Firma: {company.name if company else '-'}", gap=14)
    pdf.line(f"Firma Adresse: {company.address if company else '-'}", gap=14)
    pdf.line(f"Firma Kontakt: {_contact(company)}", gap=20)

    pdf.line(f"Einsatzort: {job.location_address}", gap=14)
    pdf.line(f"Gewerk: {job.trade}", gap=14)
    pdf.line(f"Status: {job.status}", gap=14)
    pdf.line(f"Vermittlungsgebühr: {format_money(job.referral_fee)}", gap=18)

    pdf.line("Beschreibung:", gap=14)
    for row in (job.description or '-').split('\n'):
        pdf.line(row, gap=12)
    pdf.skip(10)

    report = job.report
    if report is not None:
        pdf.line("Einsatzprotokoll:", gap=14)
        sections = [
            ("Arbeiten", report.steps),
            ("Zeiten", report.times),
            ("Material", report.material),
            ("Ergebnis", report.result),
        ]
        for title, text in sections:
            if not text:
                continue
            pdf.line(f"{title}:", gap=12)
            for row in str(text).split('\n'):
                pdf.line(row, indent=12, gap=12)
            pdf.skip(8)
        if report.photos_url:
            pdf.line(f"Fotos: {report.photos_url}", gap=12)

    return pdf.finish()


def render_invoice_pdf(invoice, settings) -> bytes:
    pdf = PdfWriter(invoice.invoice_number)
    pdf.header(settings)
    company = invoice.company

    pdf.line("RECHNUNG", size=16, gap=18)
    pdf.line(f"Rechnungsnummer: {invoice.invoice_number}", gap=14)
    pdf.line(f"Rechnungsdatum: {_date(invoice.date)}", gap=14)
    pdf.line(f"Leistungszeitraum: {invoice.month_year}", gap=22)

    pdf.line("Rechnung an:", gap=14)
    pdf.line(company.name if company else '-', gap=12)
    pdf.line(company.address if company else '-', gap=12)
    if company is not None and company.vat_id:
        pdf.line(f"UID: {company.vat_id}", gap=12)
    pdf.line((company.email or '').strip() if company else '', gap=22)

    pdf.line("Vermittelte Aufträge:", gap=16)
    pdf.line("Nr. | Datum | Hausverwaltung | Adresse | Gewerk | Gebühr", size=9, gap=12)
    for idx, job in enumerate(invoice.jobs, start=1):
        pm = job.property_manager
        pdf.line(
            f"{idx}. {job.job_number} | {_date(job.created_at)} | {pm.name if pm else '-'} | "
            f"{pm.address if pm else '-'} | {job.trade} | {format_money(job.referral_fee)}",
            size=9, gap=12,
        )

    pdf.skip(10)
    pdf.line(f"Gesamtsumme: {format_money(invoice.total_amount)}", size=12, gap=18)
    terms = company.payment_terms_days if company and company.payment_terms_days is not None else 14
    pdf.line(f"Zahlungsziel: {terms} Tage", size=10, gap=14)
    pdf.line("Hinweis: Diese Rechnung dient als Zahlungserinnerung für die vermittelten Notdienste.", size=10)

    return pdf.finish()
