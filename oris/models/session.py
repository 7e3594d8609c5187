from __future__ import annotations
from datetime import date
from typing import List

from pydantic import BaseModel, Field

from .common import Document, gen_id


class Trainee(BaseModel):
    id: str = Field(default_factory=gen_id)
    name: str                      # Prénom Nom


class Session(Document):
    training_id: str
    client_id: str
    start_date: date
    end_date: date
    trainer: str = ""
    location: str = ""
    trainees_count: int = Field(default=0, ge=0)   # nombre prévu
    trainees: List[Trainee] = Field(default_factory=list)

    @property
    def headcount(self) -> int:
        return len(self.trainees) or self.trainees_count
