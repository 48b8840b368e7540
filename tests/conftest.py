from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from notprofi import create_app
from notprofi.config import TestConfig
from notprofi.extensions import db
from notprofi.models import Company, Job, PropertyManager


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/auth/login", json={"email": TestConfig.ADMIN_EMAIL, "password": TestConfig.ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client


@pytest.fixture
def make_company(app):
    def _make(name="RohrMax", **kwargs):
        company = Company(name=name, address=kwargs.pop("address", "Gasgasse 10"), **kwargs)
        db.session.add(company)
        db.session.commit()
        return company

    return _make


@pytest.fixture
def make_property_manager(app):
    def _make(name="HV Müller", **kwargs):
        pm = PropertyManager(name=name, address=kwargs.pop("address", "Hauptstr 1, Wien"), **kwargs)
        db.session.add(pm)
        db.session.commit()
        return pm

    return _make


@pytest.fixture
def make_job(app):
    counter = {"n": 0}

    def _make(company=None, fee="0", status="done", created_at=datetime(2024, 1, 10, 9, 0), **kwargs):
        counter["n"] += 1
        job = Job(
            job_number=f"NP24-T{counter['n']:05d}",
            company_id=company.id if company is not None else None,
            location_address=kwargs.pop("location_address", "Testgasse 5, Top 10"),
            trade=kwargs.pop("trade", "Installateur"),
            status=status,
            referral_fee=Decimal(fee),
            created_at=created_at,
            **kwargs,
        )
        db.session.add(job)
        db.session.commit()
        return job

    return _make
