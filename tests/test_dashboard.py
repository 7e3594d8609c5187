from datetime import date

import pytest

from oris.models.certification import Certification
from oris.models.invoice import Invoice, InvoiceStatus
from oris.models.quote import QuoteLine
from oris.services.dashboard_service import paid_revenue, trend


def _invoice(invoices, client, amount, issued_on, status=None):
    inv = invoices.create_invoice(
        client.id, [QuoteLine(description="Formation", quantity=1, unit_price=amount)], issued_on=issued_on)
    if status is not None:
        inv = invoices.update_status(inv.id, status)
    return inv


@pytest.mark.parametrize("current,previous,label,direction", [
    (150, 100, "+50% vs N-1", "up"),
    (50, 100, "-50% vs N-1", "down"),
    (100, 100, "0% vs N-1", "up"),
    (100, 0, "Démarrage activité", "up"),
    (0, 0, "Pas de données N-1", "neutral"),
])
def test_trend(current, previous, label, direction):
    assert trend(current, previous) == (label, direction)


def test_paid_revenue_is_order_independent():
    invs = [
        Invoice(client_id="c", date=date(2024, 1, 1), status=InvoiceStatus.PAID, total_ht=v)
        for v in (0.1, 0.2, 0.3, 1e16, -1e16)
    ]
    assert paid_revenue(invs, 2024) == paid_revenue(list(reversed(invs)), 2024)
    assert paid_revenue(invs, 2023) == 0


def test_snapshot(dashboard, invoices, quotes, sessions, certifications, client, training, sent_quote):
    _invoice(invoices, client, 1000, date(2024, 3, 5), InvoiceStatus.PAID)
    cancelled = _invoice(invoices, client, 500, date(2024, 4, 10), InvoiceStatus.PAID)
    invoices.create_credit_note(cancelled.id, today=date(2024, 4, 20))
    _invoice(invoices, client, 400, date(2023, 5, 1), InvoiceStatus.PAID)
    _invoice(invoices, client, 300, date(2024, 6, 1))
    _invoice(invoices, client, 200, date(2024, 2, 1), InvoiceStatus.OVERDUE)

    sessions.schedule(training.id, client.id, date(2024, 6, 28), date(2024, 7, 2), "Marc", "Lyon")
    sessions.schedule(training.id, client.id, date(2024, 5, 2), date(2024, 5, 3), "Marc", "Lyon")
    certifications.add(Certification(
        trainee_name="Thomas Anderson", company_name=client.name, level="B2V", expiry_date=date(2024, 8, 1)))
    certifications.add(Certification(
        trainee_name="Sarah Connor", company_name=client.name, level="BC", expiry_date=date(2025, 6, 1)))

    snap = dashboard.snapshot(today=date(2024, 6, 30), alert_within_days=60)
    assert snap.year == 2024
    assert snap.current_year_revenue == 1000
    assert snap.previous_year_revenue == 400
    assert (snap.trend_label, snap.trend_direction) == ("+150% vs N-1", "up")
    assert [m.name for m in snap.monthly][:3] == ["Jan", "Fév", "Mar"]
    assert snap.monthly[2].revenue == 1000
    assert snap.monthly[3].revenue == 0
    assert snap.pending_revenue == 300
    assert snap.overdue_revenue == 200
    assert snap.paid_global == 1400
    assert snap.pending_quotes == 1
    assert snap.upcoming_sessions == 1
    assert [c.trainee_name for c in snap.certification_alerts] == ["Thomas Anderson"]

    all_alerts = dashboard.snapshot(today=date(2024, 6, 30)).certification_alerts
    assert [c.trainee_name for c in all_alerts] == ["Thomas Anderson", "Sarah Connor"]


def test_empty_snapshot(dashboard):
    snap = dashboard.snapshot(today=date(2024, 1, 15))
    assert snap.current_year_revenue == 0
    assert snap.trend_label == "Pas de données N-1"
    assert len(snap.monthly) == 12
    assert snap.pending_quotes == 0
    assert snap.certification_alerts == []
