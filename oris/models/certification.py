from __future__ import annotations
from datetime import date

from .common import Document


class Certification(Document):
    trainee_name: str
    company_name: str
    level: str                     # ex: B2V, BC, TST-BAT
    expiry_date: date
