import pytest

from oris.errors import NotFoundError, ValidationError
from oris.models.client import Client, ClientStatus
from oris.models.training import TrainingCategory, TrainingModule
from oris.services.client_service import UNKNOWN_CLIENT


def test_client_crud(clients, client):
    assert clients.get(client.id).city == "Grenoble"
    moved = client.model_copy(update={"city": "Lyon", "status": ClientStatus.INACTIF})
    clients.update_client(moved)
    assert clients.get(client.id).status == ClientStatus.INACTIF
    assert clients.delete_client(client.id)
    with pytest.raises(NotFoundError):
        clients.get(client.id)


def test_client_requires_name(clients):
    with pytest.raises(ValidationError):
        clients.add_client(Client(name="  "))
    with pytest.raises(ValidationError):
        clients.update_client(Client(name="Sans id"))


def test_blank_email_becomes_none():
    assert Client(name="ACME", email="  ").email is None


def test_search_and_display_name(clients, client):
    clients.add_client(Client(name="Syndicat des Eaux", contact_name="Marie Curie"))
    assert [c.name for c in clients.search("irtec")] == ["IRTEC Réseaux"]
    assert [c.name for c in clients.search("CURIE")] == ["Syndicat des Eaux"]
    assert len(clients.search("  ")) == 2
    assert clients.display_name(client.id) == "IRTEC Réseaux"
    assert clients.display_name("") == UNKNOWN_CLIENT
    assert clients.display_name("supprimé") == UNKNOWN_CLIENT


def test_invalid_records_are_skipped(clients, store, client):
    store.clients.add({"email": "sans-nom"})
    assert [c.id for c in clients.list_clients()] == [client.id]


def test_catalog(catalog, training):
    assert training.duration_hours == 21
    assert catalog.find_by_title("Habilitation Électrique BR/B2V/BC").id == training.id
    assert catalog.find_by_title("habilitation électrique br/b2v/bc") is None
    catalog.add_training(TrainingModule(
        reference="TST-BAT", title="TST Batteries", category=TrainingCategory.TST, duration_days=2, price_ht=1200))
    assert [t.reference for t in catalog.by_category(TrainingCategory.TST)] == ["TST-BAT"]
    updated = catalog.update_training(training.model_copy(update={"price_ht": 900}))
    assert catalog.get(training.id).price_ht == updated.price_ht == 900
    assert catalog.delete_training(training.id)
    with pytest.raises(NotFoundError):
        catalog.get(training.id)


def test_catalog_requires_reference_and_title(catalog):
    with pytest.raises(ValidationError):
        catalog.add_training(TrainingModule(reference="", title="Sans référence"))
