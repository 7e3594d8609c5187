from __future__ import annotations
import logging
import re
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from ics import Calendar, Event

from oris.errors import NotFoundError
from oris.services.catalog_service import CatalogService
from oris.services.client_service import ClientService
from oris.services.session_service import SessionService
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)


def _safe(text: str) -> str:
    text = re.sub(r'[\\/:*?"<>|\n\r\t]', "_", (text or "").strip())
    return re.sub(r"\s+", "_", text) or "session"


class CalendarService:
    """Export des sessions au format ICS (agenda Outlook / Google / Apple)."""

    def __init__(self, store: DataStore, exports_dir: Union[str, Path]):
        self.exports_dir = Path(exports_dir) / "agenda"
        self.sessions = SessionService(store)
        self.catalog = CatalogService(store)
        self.clients = ClientService(store)

    def build_calendar(self, session_id: str) -> Calendar:
        s = self.sessions.get(session_id)
        try:
            title = self.catalog.get(s.training_id).title
        except NotFoundError:
            title = "Formation"
        c = Calendar()
        e = Event()
        e.name = f"{title} – {self.clients.display_name(s.client_id)}"
        e.begin = s.start_date.isoformat()
        e.end = s.end_date.isoformat()
        e.make_all_day()
        e.location = s.location
        e.description = f"Formateur : {s.trainer}\nStagiaires : {s.headcount}"
        c.events.add(e)
        return c

    def export_session_ics(self, session_id: str, out_dir: Optional[Union[str, Path]] = None) -> Path:
        c = self.build_calendar(session_id)
        s = self.sessions.get(session_id)
        target = Path(out_dir) if out_dir else self.exports_dir
        target.mkdir(parents=True, exist_ok=True)
        path = target / f"Session_{_safe(s.location)}_{s.start_date.isoformat()}.ics"
        with open(path, "w", encoding="utf-8") as f:
            f.write(c.serialize())
        logger.info("ICS généré : %s (%d jour(s))", path, (s.end_date - s.start_date + timedelta(days=1)).days)
        return path
