from datetime import date

import pytest

from oris.errors import NotFoundError, ValidationError
from oris.models.certification import Certification


def _cert(name, expiry, company="IRTEC Réseaux", level="B2V"):
    return Certification(trainee_name=name, company_name=company, level=level, expiry_date=expiry)


def test_list_sorted_by_expiry(certifications):
    certifications.add(_cert("B", date(2025, 1, 1)))
    certifications.add(_cert("A", date(2024, 7, 1)))
    assert [c.trainee_name for c in certifications.list_certifications()] == ["A", "B"]


def test_alerts_horizon(certifications):
    certifications.add(_cert("Expirée", date(2024, 5, 1)))
    certifications.add(_cert("Proche", date(2024, 8, 29)))
    certifications.add(_cert("Lointaine", date(2025, 3, 1)))
    today = date(2024, 6, 30)
    assert [c.trainee_name for c in certifications.alerts(today, 60)] == ["Expirée", "Proche"]
    assert len(certifications.alerts(today)) == 3


def test_add_requires_trainee_and_level(certifications):
    with pytest.raises(ValidationError):
        certifications.add(_cert(" ", date(2024, 1, 1)))
    with pytest.raises(ValidationError):
        certifications.add(_cert("Alice", date(2024, 1, 1), level=""))


def test_delete(certifications):
    c = certifications.add(_cert("Alice", date(2024, 1, 1)))
    assert certifications.delete(c.id)
    assert certifications.list_certifications() == []


def test_company_contact(certifications, client):
    assert certifications.company_contact("IRTEC Réseaux").id == client.id
    with pytest.raises(NotFoundError):
        certifications.company_contact("Inconnue SA")
