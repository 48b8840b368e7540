from datetime import datetime
from decimal import Decimal

import pytest

import notprofi.invoicing as invoicing
from notprofi.extensions import db
from notprofi.invoicing import generate_invoices, jobs_for_month, mark_paid
from notprofi.errors import NotFound
from notprofi.models import Invoice, Job, Settings
from notprofi.schemas import InvoiceOut, dump


def _settings(next_number=1):
    s = Settings.current()
    s.next_invoice_number = next_number
    db.session.commit()
    return s


def test_one_invoice_per_company_with_exact_total(make_company, make_job):
    company = make_company()
    j1 = make_job(company, fee="30.00", created_at=datetime(2024, 1, 10))
    j2 = make_job(company, fee="20.50", created_at=datetime(2024, 1, 22))

    created = generate_invoices("2024-01")

    assert len(created) == 1
    inv = created[0]
    assert inv.invoice_number == "RE-202401-0001"
    assert inv.total_amount == Decimal("50.50")
    assert dump(InvoiceOut, inv)["totalAmount"] == "50.50"
    assert inv.company_id == company.id
    assert inv.status == "created"
    assert inv.month_year == "2024-01"
    assert db.session.get(Job, j1.id).invoice_id == inv.id
    assert db.session.get(Job, j2.id).invoice_id == inv.id


def test_zero_fee_company_gets_no_invoice_and_keeps_counter(make_company, make_job):
    _settings(5)
    zero = make_company("Zero GmbH")
    make_job(zero, fee="0")

    assert generate_invoices("2024-01") == []
    assert Settings.current().next_invoice_number == 5
    assert db.session.execute(db.select(Invoice)).first() is None


def test_only_done_unbilled_jobs_are_billed(make_company, make_job):
    company = make_company()
    done = make_job(company, fee="40")
    open_job = make_job(company, fee="99", status="open")
    cancelled = make_job(company, fee="99", status="cancelled")

    created = generate_invoices("2024-01")

    assert [inv.total_amount for inv in created] == [Decimal("40.00")]
    assert db.session.get(Job, done.id).invoice_id == created[0].id
    assert db.session.get(Job, open_job.id).invoice_id is None
    assert db.session.get(Job, cancelled.id).invoice_id is None


def test_jobs_without_company_are_dropped(make_job):
    orphan = make_job(None, fee="25")
    assert generate_invoices("2024-01") == []
    assert db.session.get(Job, orphan.id).invoice_id is None


def test_jobs_are_grouped_by_creation_month(make_company, make_job):
    company = make_company()
    make_job(company, fee="10", created_at=datetime(2024, 1, 31, 23, 59))
    make_job(company, fee="70", created_at=datetime(2024, 2, 1, 0, 0))

    assert [j.referral_fee for j in jobs_for_month("2024-01")] == [Decimal("10.00")]
    created = generate_invoices("2024-02")
    assert [inv.total_amount for inv in created] == [Decimal("70.00")]


def test_malformed_month_returns_empty_list(make_company, make_job):
    make_job(make_company(), fee="10")
    for token in ("2024-1", "garbage", "2024-13", "",
                  "0000-01", "9999-12", "2024-01\n", "\u0662\u0660\u0662\u0664-\u0660\u0661"):
        assert generate_invoices(token) == []
    assert Settings.current().next_invoice_number == 1


def test_counter_advances_once_per_invoice_in_company_order(make_company, make_job):
    _settings(7)
    first = make_company("Alpha")
    second = make_company("Beta")
    third = make_company("Gamma")
    make_job(third, fee="5")
    make_job(first, fee="15")
    make_job(second, fee="0")
    make_job(second, fee="0.00")

    created = generate_invoices("2024-01")

    assert [inv.company_id for inv in created] == [first.id, third.id]
    assert [inv.invoice_number for inv in created] == ["RE-202401-0007", "RE-202401-0008"]
    assert Settings.current().next_invoice_number == 9


def test_rerun_only_bills_newly_eligible_jobs(make_company, make_job):
    company = make_company()
    first = make_job(company, fee="30")
    initial = generate_invoices("2024-01")
    assert generate_invoices("2024-01") == []

    late = make_job(company, fee="12.25", status="open")
    late.status = "done"
    db.session.commit()

    again = generate_invoices("2024-01")

    assert len(again) == 1
    assert again[0].total_amount == Decimal("12.25")
    assert again[0].invoice_number == "RE-202401-0002"
    assert db.session.get(Job, first.id).invoice_id == initial[0].id
    assert db.session.get(Job, late.id).invoice_id == again[0].id


def test_missing_settings_row_starts_at_one(make_company, make_job):
    assert db.session.execute(db.select(Settings)).first() is None
    make_job(make_company(), fee="1")
    assert generate_invoices("2024-01")[0].invoice_number == "RE-202401-0001"
    assert Settings.current().next_invoice_number == 2


def test_failure_rolls_back_whole_run(monkeypatch, make_company, make_job):
    _settings(3)
    a = make_company("A")
    b = make_company("B")
    ja = make_job(a, fee="10")
    jb = make_job(b, fee="20")

    real = invoicing.allocate_invoice_number
    calls = []

    def flaky(settings, month_year):
        calls.append(month_year)
        if len(calls) == 2:
            raise RuntimeError("database went away")
        return real(settings, month_year)

    monkeypatch.setattr(invoicing, "allocate_invoice_number", flaky)

    with pytest.raises(RuntimeError):
        generate_invoices("2024-01")

    assert db.session.execute(db.select(Invoice)).first() is None
    assert Settings.current().next_invoice_number == 3
    assert db.session.get(Job, ja.id).invoice_id is None
    assert db.session.get(Job, jb.id).invoice_id is None


def test_mark_paid_sets_status_and_timestamp_regardless_of_state(make_company, make_job):
    make_job(make_company(), fee="10")
    inv = generate_invoices("2024-01")[0]

    first = mark_paid(inv.id, datetime(2024, 2, 15, 10, 30))
    assert first.status == "paid"
    assert first.paid_at == datetime(2024, 2, 15, 10, 30)

    again = mark_paid(inv.id, datetime(2023, 12, 1))
    assert again.status == "paid"
    assert again.paid_at == datetime(2023, 12, 1)


def test_mark_paid_unknown_invoice(app):
    with pytest.raises(NotFound):
        mark_paid(999, datetime(2024, 1, 1))


def test_settings_row_is_locked_before_jobs_are_read(monkeypatch, make_company, make_job):
    make_job(make_company(), fee="10")
    events = []

    real_current = Settings.current.__func__
    real_jobs_for_month = invoicing.jobs_for_month

    def current(cls, for_update=False):
        events.append(("settings", for_update))
        return real_current(cls, for_update)

    def jobs_for_month(month_year):
        events.append("jobs")
        return real_jobs_for_month(month_year)

    monkeypatch.setattr(Settings, "current", classmethod(current))
    monkeypatch.setattr(invoicing, "jobs_for_month", jobs_for_month)

    generate_invoices("2024-01")

    assert events[0] == ("settings", True)
    assert events.index("jobs") == 1
