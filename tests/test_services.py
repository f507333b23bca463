"""Unit tests for auth/service.py and fleet/service.py.

Covers:
- login: exact credential match, unknown email and wrong password both None
- add: id assigned, DuplicateKey leaves the store unchanged, Role.NONE and a
  missing record never reach the store, constraint race maps to DuplicateKey
- first-run seeding only into an empty store
- vehicle add/update/delete, missing records rejected before the store
- vehicle listing: name/brand filters and page windows over store order
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import Administrator, Role
from auth.service import AdministratorService
from auth.store import AdministratorStore
from core.errors import Conflict, DuplicateKey, InvalidArgument
from fleet.models import Vehicle
from fleet.service import VehicleService
from fleet.store import VehicleStore

# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def admin_service():
    store = AdministratorStore("sqlite:///:memory:")
    service = AdministratorService(store)
    service.add(Administrator("adm@teste.com", "123456", Role.ADM))
    yield service
    store.close()


@pytest.fixture
def vehicle_service():
    store = VehicleStore("sqlite:///:memory:")
    yield VehicleService(store)
    store.close()


# ---------------------------------------------------------------------------
# AdministratorService
# ---------------------------------------------------------------------------


def test_login_success(admin_service):
    admin = admin_service.login("adm@teste.com", "123456")
    assert admin is not None
    assert admin.role is Role.ADM


@pytest.mark.parametrize(
    ("email", "password"),
    [
        ("adm@teste.com", "errada"),
        ("naoexiste@teste.com", "123456"),
        ("", ""),
    ],
)
def test_login_failure_is_none(admin_service, email, password):
    assert admin_service.login(email, password) is None


def test_add_assigns_id(admin_service):
    created = admin_service.add(Administrator("editor@teste.com", "abc", Role.EDITOR))
    assert created.id is not None
    assert admin_service.get_by_id(created.id).email == "editor@teste.com"


def test_add_duplicate_email_raises_and_keeps_original(admin_service):
    before = admin_service.get_all()
    with pytest.raises(DuplicateKey) as excinfo:
        admin_service.add(Administrator("adm@teste.com", "outra", Role.EDITOR))
    assert isinstance(excinfo.value, Conflict)
    assert admin_service.get_all() == before
    assert admin_service.login("adm@teste.com", "123456") is not None


def test_add_role_none_never_reaches_store():
    store = MagicMock(spec=AdministratorStore)
    with pytest.raises(InvalidArgument):
        AdministratorService(store).add(Administrator("x@teste.com", "x", Role.NONE))
    store.create_administrator.assert_not_called()
    store.get_by_email.assert_not_called()


def test_add_missing_record_rejected():
    store = MagicMock(spec=AdministratorStore)
    with pytest.raises(InvalidArgument):
        AdministratorService(store).add(None)
    store.create_administrator.assert_not_called()


def test_add_constraint_race_maps_to_duplicate_key():
    store = MagicMock(spec=AdministratorStore)
    store.get_by_email.return_value = None
    store.create_administrator.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE"))
    with pytest.raises(DuplicateKey):
        AdministratorService(store).add(Administrator("x@teste.com", "x", Role.ADM))


def test_get_all_pages_in_id_order(admin_service):
    for i in range(6):
        admin_service.add(Administrator(f"adm{i}@teste.com", "x", Role.EDITOR))
    everything = admin_service.get_all()
    assert len(everything) == 7
    assert [a.id for a in admin_service.get_all(page=2, page_size=5)] == [a.id for a in everything[5:]]


def test_get_missing_administrator(admin_service):
    assert admin_service.get_by_id(999) is None


def test_seed_into_empty_store():
    store = AdministratorStore("sqlite:///:memory:")
    service = AdministratorService(store)
    created = service.ensure_seed_administrator("adm@teste.com", "123456", Role.ADM)
    assert created is not None
    assert service.login("adm@teste.com", "123456") is not None
    store.close()


def test_seed_skipped_when_administrators_exist(admin_service):
    assert admin_service.ensure_seed_administrator("outro@teste.com", "x", Role.ADM) is None
    assert admin_service.login("outro@teste.com", "x") is None


def test_seed_skipped_without_credentials():
    store = MagicMock(spec=AdministratorStore)
    assert AdministratorService(store).ensure_seed_administrator("", "", Role.ADM) is None
    store.has_administrators.assert_not_called()


# ---------------------------------------------------------------------------
# VehicleService
# ---------------------------------------------------------------------------


def test_add_and_get_vehicle(vehicle_service):
    created = vehicle_service.add(Vehicle(name="Uno", brand="Fiat", year=2010))
    assert created.id is not None
    assert vehicle_service.get_by_id(created.id) == created


@pytest.mark.parametrize("operation", ["add", "update", "delete"])
def test_missing_vehicle_never_reaches_store(operation):
    store = MagicMock(spec=VehicleStore)
    with pytest.raises(InvalidArgument):
        getattr(VehicleService(store), operation)(None)
    assert store.method_calls == []


def test_update_replaces_fields(vehicle_service):
    created = vehicle_service.add(Vehicle(name="Uno", brand="Fiat", year=2010))
    vehicle_service.update(Vehicle(id=created.id, name="Uno Way", brand="Fiat", year=2014))
    assert vehicle_service.get_by_id(created.id) == Vehicle(id=created.id, name="Uno Way", brand="Fiat", year=2014)


def test_delete_then_get_is_none(vehicle_service):
    created = vehicle_service.add(Vehicle(name="Uno", brand="Fiat", year=2010))
    vehicle_service.delete(created)
    assert vehicle_service.get_by_id(created.id) is None


def test_filter_by_name(vehicle_service):
    vehicle_service.add(Vehicle(name="Uno", brand="Fiat", year=2010))
    vehicle_service.add(Vehicle(name="Palio", brand="Fiat", year=2012))
    assert [v.name for v in vehicle_service.get_all(name="Uno")] == ["Uno"]
    assert [v.name for v in vehicle_service.get_all(brand="fiat")] == ["Uno", "Palio"]


def test_second_page_of_three(vehicle_service):
    for i in range(1, 11):
        vehicle_service.add(Vehicle(name=f"Carro {i}", brand="Marca", year=2000 + i))
    assert [v.name for v in vehicle_service.get_all(page=2, page_size=3)] == ["Carro 4", "Carro 5", "Carro 6"]


def test_clamped_listing():
    store = VehicleStore("sqlite:///:memory:")
    service = VehicleService(store, clamp_pagination=True)
    for i in range(1, 4):
        service.add(Vehicle(name=f"Carro {i}", brand="Marca", year=2000))
    assert [v.name for v in service.get_all(page=0, page_size=0)] == ["Carro 1"]
    store.close()
