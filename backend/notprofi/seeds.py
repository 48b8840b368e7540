from decimal import Decimal

from .extensions import db
from .models import Company, Job, PropertyManager, Settings
from .cooperations import toggle_cooperation
from .jobs import create_job
from . import create_app


def seed_data():
    """Demo records for local development; returns False if data exists."""
    if db.session.execute(db.select(PropertyManager.id).limit(1)).first():
        return False

    pm1 = PropertyManager(name='HV Müller', address='Hauptstr 1, Wien', email='mueller@hv.at', phone='0123456')
    pm2 = PropertyManager(name='ImmoWest', address='Westbahnstr 5, Wien', email='office@immowest.at', phone='0987654')
    c1 = Company(name='RohrMax', address='Gasgasse 10', tags=['Installateur'], email='info@rohrmax.at')
    c2 = Company(name='Elektro Blitz', address='Stromstr 2', tags=['Elektriker'], email='blitz@elektro.at')
    db.session.add_all([pm1, pm2, c1, c2])
    Settings.current()
    db.session.commit()

    toggle_cooperation(c1.id, pm1.id, active=True)
    toggle_cooperation(c2.id, pm2.id, active=True)

    create_job({
        'property_manager_id': pm1.id,
        'company_id': c1.id,
        'location_address': 'Testgasse 5, Top 10',
        'trade': 'Installateur',
        'status': 'done',
        'referral_fee': Decimal('50.00'),
    })
    return True


def run():
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_data()

if __name__ == '__main__':
    run()
