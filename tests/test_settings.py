import pytest

from oris.errors import ValidationError
from oris.models.settings import COMPANY_DEFAULTS, SETTINGS_DOC_ID


def test_load_writes_defaults_once(company, store):
    s = company.load()
    assert s.name == COMPANY_DEFAULTS["name"]
    assert s.logo_url is None
    assert store.settings.get(SETTINGS_DOC_ID)["iban"] == COMPANY_DEFAULTS["iban"]
    store.settings.update(SETTINGS_DOC_ID, {"name": "ORIS SUD"})
    assert company.load().name == "ORIS SUD"


def test_update_merges_fields(company):
    out = company.update({"city": "Grenoble", "phone": "04 76 00 00 00"})
    assert out.city == "Grenoble"
    assert out.name == COMPANY_DEFAULTS["name"]
    assert company.load().phone == "04 76 00 00 00"


def test_update_accepts_model(company):
    s = company.load().model_copy(update={"bic": "ORISFR3G"})
    assert company.update(s).bic == "ORISFR3G"


def test_update_rejects_invalid_email(company):
    with pytest.raises(ValidationError):
        company.update({"email": "pas-un-email"})
    assert company.load().email == COMPANY_DEFAULTS["email"]


def test_logo(company):
    out = company.set_logo("data:image/png;base64,iVBORw0KGgo=")
    assert out.logo_url.startswith("data:image/png")
    assert company.set_logo("https://oris-formation.fr/logo.png").logo_url.endswith("logo.png")
    assert company.clear_logo().logo_url is None


@pytest.mark.parametrize("url", ["", "file:///tmp/logo.png", "data:text/plain;base64,AAAA"])
def test_logo_rejects_other_sources(company, url):
    with pytest.raises(ValidationError):
        company.set_logo(url)


def test_logo_size_limit(company):
    with pytest.raises(ValidationError, match="500 Ko"):
        company.set_logo("data:image/png;base64," + "A" * 800_000)
