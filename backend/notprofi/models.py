from datetime import datetime
from .extensions import db

DEFAULT_SETTINGS = {
    'company_name': 'Notprofi24.at',
    'address': 'Heiligenstädterstraße 152/6, 1190 Wien',
    'email': 'office@notprofi24.at',
    'website': 'www.notprofi24.at',
    'next_invoice_number': 1,
}


class Settings(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    company_name = db.Column(db.String(120), nullable=False, default=DEFAULT_SETTINGS['company_name'])
    address = db.Column(db.String(255), nullable=False, default=DEFAULT_SETTINGS['address'])
    email = db.Column(db.String(120), nullable=False, default=DEFAULT_SETTINGS['email'])
    website = db.Column(db.String(120), nullable=False, default=DEFAULT_SETTINGS['website'])
    next_invoice_number = db.Column(db.Integer, nullable=False, default=1)

    @classmethod
    def current(cls, for_update=False):
        """Return the singleton row, creating it with defaults on first read."""
        query = db.select(cls).order_by(cls.id).limit(1)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        s = db.session.execute(query).scalar_one_or_none()
        if s is None:
            s = cls(**DEFAULT_SETTINGS)
            db.session.add(s)
            db.session.flush()
        return s


class PropertyManager(db.Model):
    __tablename__ = 'property_managers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32))
    email = db.Column(db.String(120))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    cooperations = db.relationship('Cooperation', back_populates='property_manager',
                                   cascade='all, delete-orphan')


class Company(db.Model):
    __tablename__ = 'companies'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    contact_person = db.Column(db.String(120))
    address = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32))
    email = db.Column(db.String(120))
    tags = db.Column(db.JSON, default=list)  # e.g. ["Installateur", "Elektriker"]
    vat_id = db.Column(db.String(32))
    payment_terms_days = db.Column(db.Integer, default=14)
    notes = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    cooperations = db.relationship('Cooperation', back_populates='company',
                                   cascade='all, delete-orphan')


class Cooperation(db.Model):
    __tablename__ = 'cooperations'
    __table_args__ = (
        db.UniqueConstraint('company_id', 'property_manager_id', name='uq_cooperation_pair'),
    )

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=False)
    property_manager_id = db.Column(db.Integer, db.ForeignKey('property_managers.id'), nullable=False)

    company = db.relationship('Company', back_populates='cooperations')
    property_manager = db.relationship('PropertyManager', back_populates='cooperations')


class Job(db.Model):
    __tablename__ = 'jobs'

    id = db.Column(db.Integer, primary_key=True)
    job_number = db.Column(db.String(32), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    property_manager_id = db.Column(db.Integer, db.ForeignKey('property_managers.id'))
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'))
    location_address = db.Column(db.String(255), nullable=False)
    trade = db.Column(db.String(120), nullable=False)  # Gewerk
    description = db.Column(db.Text)
    status = db.Column(db.String(16), nullable=False, default='open')
    referral_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    internal_notes = db.Column(db.Text)
    invoice_id = db.Column(db.Integer, db.ForeignKey('invoices.id'))

    property_manager = db.relationship('PropertyManager')
    company = db.relationship('Company')
    invoice = db.relationship('Invoice', back_populates='jobs')
    report = db.relationship('JobReport', uselist=False, back_populates='job')


class JobReport(db.Model):
    __tablename__ = 'job_reports'

    id = db.Column(db.Integer, primary_key=True)
    job_id = db.Column(db.Integer, db.ForeignKey('jobs.id'), nullable=False, unique=True)
    steps = db.Column(db.Text)
    times = db.Column(db.Text)
    material = db.Column(db.Text)
    result = db.Column(db.Text)
    photos_url = db.Column(db.String(500))

    job = db.relationship('Job', back_populates='report')


class Invoice(db.Model):
    __tablename__ = 'invoices'

    id = db.Column(db.Integer, primary_key=True)
    invoice_number = db.Column(db.String(32), nullable=False, unique=True)
    date = db.Column(db.DateTime, default=datetime.utcnow)
    month_year = db.Column(db.String(7), nullable=False)  # "2024-01"
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'))
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(16), nullable=False, default='created')
    paid_at = db.Column(db.DateTime)

    company = db.relationship('Company')
    jobs = db.relationship('Job', back_populates='invoice', order_by='Job.created_at')

