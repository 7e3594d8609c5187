from __future__ import annotations
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr

SETTINGS_DOC_ID = "company"

COMPANY_DEFAULTS: Dict[str, Any] = {
    "name": "ORIS FORMATION",
    "address": "12 Rue de l'Énergie",
    "zip": "69000",
    "city": "Lyon",
    "siret": "123 456 789 00012",
    "vat": "FR 12 123456789",
    "phone": "04 78 00 00 00",
    "email": "contact@oris-formation.fr",
    "iban": "FR76 1234 5678 9012 3456 7890 123",
    "bic": "ORISFR2L",
}


class CompanySettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    address: str = ""
    zip: str = ""
    city: str = ""
    siret: str = ""
    vat: str = ""
    phone: str = ""
    email: Optional[EmailStr] = None
    iban: str = ""
    bic: str = ""
    logo_url: Optional[str] = None   # data URL base64 ou URL http(s)

    @classmethod
    def defaults(cls) -> "CompanySettings":
        return cls.model_validate(COMPANY_DEFAULTS)
