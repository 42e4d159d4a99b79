from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from shipadmin.models.shipping_charge import ShippingCharge
from shipadmin.schemas.shipping_charge import ShippingChargeCreate, ShippingChargeUpdate
from shipadmin.services.shipping_charge_store import (
    DuplicateShippingZoneError,
    ShippingChargeStore,
    ShippingChargeValidationError,
    get_total_shipping_cost,
)


def _payload(**overrides) -> ShippingChargeCreate:
    data = {
        "country": "India",
        "region": None,
        "delivery_charge": "50.00",
        "return_charge": "30.00",
        "estimated_days": 5,
    }
    data.update(overrides)
    return ShippingChargeCreate(**data)


def _unchecked_payload(**overrides) -> ShippingChargeCreate:
    # Skips schema validation so the store's own checks are exercised.
    data = {
        "country": "India",
        "region": None,
        "delivery_charge": Decimal("50.00"),
        "return_charge": Decimal("30.00"),
        "estimated_days": 5,
        "is_active": True,
    }
    data.update(overrides)
    return ShippingChargeCreate.model_construct(**data)


def test_create_sets_fields_and_matching_timestamps(db_session):
    store = ShippingChargeStore(db_session)

    obj = store.create(_payload(region="North"), current_user_email="admin@example.com")

    assert obj.id is not None
    assert obj.country == "India"
    assert obj.region == "North"
    assert obj.delivery_charge == Decimal("50.00")
    assert obj.return_charge == Decimal("30.00")
    assert obj.estimated_days == 5
    assert obj.is_active is True
    assert obj.created_at == obj.updated_at
    assert obj.created_by == "admin@example.com"
    assert obj.last_changed_by == "admin@example.com"


def test_create_trims_country_and_blank_region_becomes_none(db_session):
    store = ShippingChargeStore(db_session)

    obj = store.create(_payload(country="  India  ", region="   "))

    assert obj.country == "India"
    assert obj.region is None
    assert obj.display_name == "India"


def test_display_name_includes_region_when_set(db_session):
    store = ShippingChargeStore(db_session)

    country_wide = store.create(_payload())
    regional = store.create(_payload(region="North"))

    assert country_wide.display_name == "India"
    assert regional.display_name == "India - North"


@pytest.mark.parametrize("days", [0, 366, -3])
def test_store_rejects_estimated_days_out_of_range(db_session, days):
    store = ShippingChargeStore(db_session)

    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(estimated_days=days))
    assert store.count_charges() == 0


@pytest.mark.parametrize("days", [0, 366])
def test_schema_rejects_estimated_days_out_of_range(days):
    with pytest.raises(ValidationError):
        _payload(estimated_days=days)


def test_store_rejects_negative_charges_and_missing_country(db_session):
    store = ShippingChargeStore(db_session)

    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(delivery_charge=Decimal("-1")))
    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(return_charge=Decimal("-0.01")))
    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(country="   "))
    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(region="R" * 101))


def test_store_rejects_sub_cent_and_oversized_amounts(db_session):
    store = ShippingChargeStore(db_session)

    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(delivery_charge=Decimal("10.005")))
    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(return_charge=Decimal("0.001")))
    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(delivery_charge=Decimal("12345678901.00")))
    with pytest.raises(ShippingChargeValidationError):
        store.create(_unchecked_payload(return_charge=Decimal("1E+30")))

    assert store.count_charges() == 0


def test_store_normalises_amounts_to_cents(db_session):
    store = ShippingChargeStore(db_session)

    obj = store.create(
        _unchecked_payload(delivery_charge=Decimal("7.5"), return_charge=Decimal("2.500"))
    )

    assert obj.delivery_charge == Decimal("7.50")
    assert obj.return_charge == Decimal("2.50")


def test_check_constraint_failure_is_a_validation_error(db_session):
    store = ShippingChargeStore(db_session)

    db_session.add(
        ShippingCharge(
            country="India",
            region=None,
            region_key="",
            delivery_charge=Decimal("1.00"),
            return_charge=Decimal("1.00"),
            estimated_days=0,
        )
    )
    with pytest.raises(ShippingChargeValidationError):
        store._commit("duplicate")  # noqa: SLF001

    assert store.count_charges() == 0


def test_boundary_days_are_accepted(db_session):
    store = ShippingChargeStore(db_session)

    one = store.create(_payload(region="Fast", estimated_days=1))
    year = store.create(_payload(region="Slow", estimated_days=365))

    assert one.estimated_days == 1
    assert year.estimated_days == 365


def test_duplicate_active_zone_is_rejected(db_session):
    store = ShippingChargeStore(db_session)
    store.create(_payload(region="North"))

    with pytest.raises(DuplicateShippingZoneError):
        store.create(_payload(region=" North ", delivery_charge="99"))


def test_duplicate_country_wide_zone_is_rejected(db_session):
    store = ShippingChargeStore(db_session)
    store.create(_payload(region=None))

    with pytest.raises(DuplicateShippingZoneError):
        store.create(_payload(region=""))


def test_same_country_different_regions_coexist(db_session):
    store = ShippingChargeStore(db_session)

    store.create(_payload(region=None))
    store.create(_payload(region="North"))
    store.create(_payload(region="South"))

    assert store.count_charges(country="India") == 3


def test_database_constraint_backs_up_uniqueness(db_session):
    store = ShippingChargeStore(db_session)
    store.create(_payload())

    db_session.add(
        ShippingCharge(
            country="India",
            region=None,
            region_key="",
            delivery_charge=Decimal("1.00"),
            return_charge=Decimal("1.00"),
            estimated_days=2,
        )
    )
    with pytest.raises(DuplicateShippingZoneError):
        store._commit("duplicate")  # noqa: SLF001


def test_recreating_deactivated_zone_reactivates_row(db_session, monkeypatch):
    store = ShippingChargeStore(db_session)
    original = store.create(_payload(region="North"))
    assert store.deactivate(original.id) is True
    later = datetime(2031, 6, 1, 9, 30, 0)
    monkeypatch.setattr(ShippingChargeStore, "_now", staticmethod(lambda: later))

    revived = store.create(
        _payload(region="North", delivery_charge="75.50", estimated_days=3),
        current_user_email="ops@example.com",
    )

    assert revived.id == original.id
    assert revived.is_active is True
    assert revived.delivery_charge == Decimal("75.50")
    assert revived.estimated_days == 3
    assert revived.updated_at == later
    assert revived.created_at < later
    assert revived.last_changed_by == "ops@example.com"
    assert store.count_charges() == 1


def test_recreating_deactivated_zone_keeps_requested_inactive_flag(db_session):
    store = ShippingChargeStore(db_session)
    original = store.create(_payload(region="North"))
    store.deactivate(original.id)

    revived = store.create(_payload(region="North", delivery_charge="12.00", is_active=False))

    assert revived.id == original.id
    assert revived.is_active is False
    assert revived.delivery_charge == Decimal("12.00")
    assert store.find_by_location("India", "North") is None


def test_find_by_location_matches_trimmed_inputs(db_session):
    store = ShippingChargeStore(db_session)
    country_wide = store.create(_payload())
    north = store.create(_payload(region="North"))

    assert store.find_by_location("  India ", "  North  ").id == north.id
    assert store.find_by_location("India").id == country_wide.id
    assert store.find_by_location("India", "").id == country_wide.id
    assert store.find_by_location("India", "   ").id == country_wide.id


def test_find_by_location_is_exact_and_returns_none_when_missing(db_session):
    store = ShippingChargeStore(db_session)
    store.create(_payload(region="North"))

    assert store.find_by_location("India") is None
    assert store.find_by_location("India", "South") is None
    assert store.find_by_location("Nepal", "North") is None
    assert store.find_by_location("", "North") is None


def test_find_by_location_never_returns_inactive(db_session):
    store = ShippingChargeStore(db_session)
    obj = store.create(_payload(region="North"))
    store.deactivate(obj.id)

    assert store.find_by_location("India", "North") is None
    assert store.get(obj.id).is_active is False


def test_total_shipping_cost():
    charge = ShippingCharge(
        country="India",
        delivery_charge=Decimal("50.00"),
        return_charge=Decimal("30.00"),
        estimated_days=5,
    )

    assert get_total_shipping_cost(charge) == Decimal("50.00")
    assert get_total_shipping_cost(charge, include_return=False) == Decimal("50.00")
    assert get_total_shipping_cost(charge, include_return=True) == Decimal("80.00")
    assert charge.get_total_shipping_cost(True) == Decimal("80.00")


def test_update_applies_partial_patch_and_refreshes_updated_at(db_session, monkeypatch):
    store = ShippingChargeStore(db_session)
    obj = store.create(_payload(region="North"))
    created_at = obj.created_at

    later = created_at + timedelta(minutes=5)
    monkeypatch.setattr(ShippingChargeStore, "_now", staticmethod(lambda: later))

    updated = store.update(
        obj.id,
        ShippingChargeUpdate(delivery_charge="65", estimated_days=2),
        current_user_email="editor@example.com",
    )

    assert updated.delivery_charge == Decimal("65.00")
    assert updated.estimated_days == 2
    assert updated.return_charge == Decimal("30.00")
    assert updated.region == "North"
    assert updated.created_at == created_at
    assert updated.updated_at == later
    assert updated.last_changed_by == "editor@example.com"


def test_update_rejects_bound_violations_without_writing(db_session):
    store = ShippingChargeStore(db_session)
    obj = store.create(_payload())

    with pytest.raises(ShippingChargeValidationError):
        store.update(obj.id, ShippingChargeUpdate.model_construct(estimated_days=400))
    with pytest.raises(ShippingChargeValidationError):
        store.update(obj.id, ShippingChargeUpdate.model_construct(country=None))

    db_session.expire_all()
    assert store.get(obj.id).estimated_days == 5
    assert store.get(obj.id).country == "India"


def test_update_rejects_rekey_onto_existing_zone(db_session):
    store = ShippingChargeStore(db_session)
    store.create(_payload(region="North"))
    south = store.create(_payload(region="South"))

    with pytest.raises(DuplicateShippingZoneError):
        store.update(south.id, ShippingChargeUpdate(region="North"))


def test_update_can_rekey_to_free_zone_and_clear_region(db_session):
    store = ShippingChargeStore(db_session)
    south = store.create(_payload(region="South"))

    updated = store.update(south.id, ShippingChargeUpdate(region=None))

    assert updated.region is None
    assert updated.region_key == ""
    assert store.find_by_location("India").id == south.id


def test_update_missing_row_returns_none(db_session):
    store = ShippingChargeStore(db_session)

    assert store.update(404, ShippingChargeUpdate(estimated_days=3)) is None


def test_soft_delete_stamps_updated_at_and_hard_delete_removes(db_session, monkeypatch):
    store = ShippingChargeStore(db_session)
    soft = store.create(_payload(region="North"))
    hard = store.create(_payload(region="South"))

    later = datetime(2030, 1, 1, 12, 0, 0)
    monkeypatch.setattr(ShippingChargeStore, "_now", staticmethod(lambda: later))

    assert store.deactivate(soft.id, current_user_email="admin@example.com") is True
    assert store.get(soft.id).is_active is False
    assert store.get(soft.id).updated_at == later

    assert store.deactivate(hard.id, mode="hard") is True
    assert store.get(hard.id) is None
    assert store.deactivate(9999) is False


def test_list_filters_and_orders_by_zone(db_session):
    store = ShippingChargeStore(db_session)
    store.create(_payload(country="United States", delivery_charge="10.99", return_charge="5.99"))
    store.create(_payload(region="South"))
    north = store.create(_payload(region="North"))
    store.create(_payload())
    store.deactivate(north.id)

    names = [c.display_name for c in store.list_charges()]
    assert names == ["India", "India - North", "India - South", "United States"]

    active = [c.display_name for c in store.list_charges(is_active=True)]
    assert active == ["India", "India - South", "United States"]

    assert store.count_charges(country="India") == 3
    assert store.count_charges(country="India", is_active=False) == 1
    assert len(store.list_charges(skip=1, limit=2)) == 2
