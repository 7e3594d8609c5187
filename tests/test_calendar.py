from datetime import date

import pytest

from oris.errors import NotFoundError
from oris.services.calendar_service import CalendarService


@pytest.fixture
def calendar(store, tmp_path):
    return CalendarService(store, tmp_path / "exports")


def test_export_session_ics(calendar, sessions, training, client, tmp_path):
    s = sessions.schedule(training.id, client.id, date(2024, 6, 10), date(2024, 6, 12),
                          trainer="Marc Voltaire", location="Grenoble (Site Client)", trainees_count=6)
    path = calendar.export_session_ics(s.id)
    assert path.parent == tmp_path / "exports" / "agenda"
    assert path.name == "Session_Grenoble_(Site_Client)_2024-06-10.ics"
    content = path.read_text(encoding="utf-8")
    assert "BEGIN:VCALENDAR" in content
    assert "BEGIN:VEVENT" in content
    assert "20240610" in content
    assert "Habilitation" in content


def test_calendar_event_fields(calendar, sessions, training, client):
    s = sessions.schedule(training.id, client.id, date(2024, 6, 10), date(2024, 6, 10), "Marc", "Lyon")
    event = next(iter(calendar.build_calendar(s.id).events))
    assert event.name == "Habilitation Électrique BR/B2V/BC – IRTEC Réseaux"
    assert event.location == "Lyon"
    assert event.all_day


def test_unknown_training_uses_generic_title(calendar, sessions, catalog, training, client):
    s = sessions.schedule(training.id, client.id, date(2024, 6, 10), date(2024, 6, 10), "Marc", "Lyon")
    catalog.delete_training(training.id)
    event = next(iter(calendar.build_calendar(s.id).events))
    assert event.name.startswith("Formation – ")


def test_unknown_session(calendar):
    with pytest.raises(NotFoundError):
        calendar.export_session_ics("inconnue")
