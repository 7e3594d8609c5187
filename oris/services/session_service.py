from __future__ import annotations
import logging
from datetime import date, timedelta
from typing import List, Optional

from pydantic import ValidationError as ModelError

from oris.errors import NotFoundError, ValidationError
from oris.models.session import Session, Trainee
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)


def session_days(start: date, end: date) -> List[date]:
    """Tous les jours calendaires de `start` à `end` inclus."""
    days: List[date] = []
    current = start
    while current <= end:
        days.append(current)
        current += timedelta(days=1)
    return days


class SessionService:
    def __init__(self, store: DataStore):
        self.repo = store.sessions

    def list_sessions(self) -> List[Session]:
        out: List[Session] = []
        for d in self.repo.list_all():
            try:
                out.append(Session.from_record(d))
            except ModelError:
                logger.warning("Session invalide ignorée : %s", d.get("id"))
        return out

    def get(self, session_id: str) -> Session:
        d = self.repo.get(session_id)
        if d is None:
            raise NotFoundError("Session", session_id)
        return Session.from_record(d)

    @staticmethod
    def _check(s: Session) -> None:
        if not s.training_id or not s.client_id:
            raise ValidationError("Formation et client sont obligatoires.")
        if not s.trainer.strip() or not s.location.strip():
            raise ValidationError("Formateur et lieu sont obligatoires.")
        if s.end_date < s.start_date:
            raise ValidationError("La date de fin précède la date de début.")

    def schedule(
        self,
        training_id: str,
        client_id: str,
        start_date: date,
        end_date: date,
        trainer: str,
        location: str,
        trainees_count: int = 1,
    ) -> Session:
        s = Session(
            training_id=training_id,
            client_id=client_id,
            start_date=start_date,
            end_date=end_date,
            trainer=trainer.strip(),
            location=location.strip(),
            trainees_count=trainees_count,
            trainees=[],
        )
        self._check(s)
        rec = self.repo.add(s.to_payload())
        logger.info("Session planifiée du %s au %s", start_date, end_date)
        return Session.from_record(rec)

    def update(self, s: Session) -> Session:
        if not s.id:
            raise ValidationError("Session sans identifiant.")
        self._check(s)
        return Session.from_record(self.repo.update(s.id, s.to_payload()))

    def delete(self, session_id: str) -> bool:
        return self.repo.delete(session_id)

    # ---------- Stagiaires ---------- #

    def add_trainee(self, session_id: str, name: str) -> Session:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Le nom du stagiaire est obligatoire.")
        s = self.get(session_id)
        trainees = s.trainees + [Trainee(name=name)]
        rec = self.repo.update(session_id, {"trainees": [t.model_dump() for t in trainees]})
        return Session.from_record(rec)

    def remove_trainee(self, session_id: str, trainee_id: str) -> Session:
        s = self.get(session_id)
        trainees = [t for t in s.trainees if t.id != trainee_id]
        rec = self.repo.update(session_id, {"trainees": [t.model_dump() for t in trainees]})
        return Session.from_record(rec)

    def upcoming(self, today: Optional[date] = None) -> List[Session]:
        today = today or date.today()
        return [s for s in self.list_sessions() if s.end_date >= today]
