from __future__ import annotations
from enum import Enum
from typing import Optional

from pydantic import EmailStr, field_validator

from .common import Document


class ClientStatus(str, Enum):
    PROSPECT = "Prospect"
    CLIENT = "Client"
    INACTIF = "Inactif"


class Client(Document):
    name: str                      # raison sociale
    siret: str = ""
    vat_number: str = ""           # TVA intracom
    address: str = ""
    zip: str = ""
    city: str = ""
    contact_name: str = ""
    email: Optional[EmailStr] = None
    phone: str = ""
    status: ClientStatus = ClientStatus.PROSPECT

    @field_validator("email", mode="before")
    @classmethod
    def _empty_email(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v
