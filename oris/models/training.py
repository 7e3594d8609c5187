from __future__ import annotations
from enum import Enum

from pydantic import Field

from .common import Document


class TrainingCategory(str, Enum):
    HABILITATION = "Habilitation Électrique"
    TST = "Travaux Sous Tension"
    RESEAUX = "Réseaux (BT/HTA)"
    INSTALLATION = "Installations"


HOURS_PER_DAY = 7


class TrainingModule(Document):
    reference: str
    title: str
    category: TrainingCategory = TrainingCategory.HABILITATION
    duration_days: float = Field(default=1, ge=0)
    price_ht: float = Field(default=0.0, ge=0)
    description: str = ""

    @property
    def duration_hours(self) -> float:
        return self.duration_days * HOURS_PER_DAY
