from __future__ import annotations
from datetime import date, timedelta
from typing import Any, Dict
import uuid

from pydantic import BaseModel, ConfigDict


def gen_id() -> str:
    return uuid.uuid4().hex


def today() -> date:
    return date.today()


def in_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


class Document(BaseModel):
    """
    Base des documents stockés.
    - `id` est attribué par le store, jamais écrit dans le payload
    - tolère d'anciennes clés dans les JSON
    """
    model_config = ConfigDict(extra="ignore")

    id: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"id"})

    @classmethod
    def from_record(cls, record: Dict[str, Any]):
        return cls.model_validate(record)
