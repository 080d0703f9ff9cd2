"""Tests for the service catalog."""

from datetime import date, time
from decimal import Decimal

import pytest

from salonbook.domain.errors import DependencyError, NotFoundError, ValidationError


def test_create_service(catalog_service):
    service = catalog_service.create_service(name="Haircut", duration=30, price="35.00", description="Basic")

    assert service.price == Decimal("35.00")
    assert service.duration == 30
    assert service.active


@pytest.mark.parametrize("duration", [0, -30, 1.5, True])
def test_invalid_duration(catalog_service, duration):
    with pytest.raises(ValidationError, match="duration"):
        catalog_service.create_service(name="Haircut", duration=duration, price=10)


def test_negative_price(catalog_service):
    with pytest.raises(ValidationError, match="negative"):
        catalog_service.create_service(name="Haircut", duration=30, price=-1)


@pytest.mark.parametrize(
    "price, message",
    [(Decimal("9.999"), "decimal places"), ("35.001", "decimal places"), (Decimal("1E+8"), "too large")],
)
def test_price_must_fit_money_column(catalog_service, price, message):
    with pytest.raises(ValidationError, match=message):
        catalog_service.create_service(name="Haircut", duration=30, price=price)

    assert catalog_service.list_services() == []


def test_update_rejects_sub_cent_price(catalog_service):
    service = catalog_service.create_service(name="Haircut", duration=30, price="35.50")

    with pytest.raises(ValidationError, match="decimal places"):
        catalog_service.update_service(service.id, price=Decimal("35.505"))

    assert catalog_service.get_service(service.id).price == Decimal("35.50")


def test_free_service_allowed(catalog_service):
    assert catalog_service.create_service(name="Consultation", duration=15, price=0).price == 0


def test_blank_name(catalog_service):
    with pytest.raises(ValidationError, match="name"):
        catalog_service.create_service(name="", duration=30, price=10)


def test_list_active_only(catalog_service):
    kept = catalog_service.create_service(name="Haircut", duration=30, price=35)
    retired = catalog_service.create_service(name="Perm", duration=90, price=80)
    catalog_service.update_service(retired.id, active=False)

    assert [s.id for s in catalog_service.list_services(active_only=True)] == [kept.id]
    assert len(catalog_service.list_services()) == 2


def test_update_validates(catalog_service):
    service = catalog_service.create_service(name="Haircut", duration=30, price=35)

    with pytest.raises(ValidationError):
        catalog_service.update_service(service.id, duration=0)
    assert catalog_service.update_service(service.id, price="40").price == Decimal("40")


def test_update_missing(catalog_service):
    with pytest.raises(NotFoundError):
        catalog_service.update_service(123, price=10)


class TestDeleteService:
    def test_plain_delete(self, catalog_service):
        service = catalog_service.create_service(name="Haircut", duration=30, price=35)

        catalog_service.delete_service(service.id)

        assert catalog_service.get_service(service.id) is None

    def test_links_block_without_cascade(self, catalog_service, staff_service, sample_service, sample_professional):
        with pytest.raises(DependencyError, match="professional link"):
            catalog_service.delete_service(sample_service.id)

        assert catalog_service.get_service(sample_service.id) is not None

    def test_cascade_removes_links(self, catalog_service, staff_service, sample_service, sample_professional):
        catalog_service.delete_service(sample_service.id, cascade=True)

        assert catalog_service.get_service(sample_service.id) is None
        assert staff_service.list_services(sample_professional.id) == []

    def test_appointments_always_block(
        self, catalog_service, booking_service, sample_client, sample_professional, sample_service
    ):
        booking_service.create_appointment(
            sample_client.id, sample_professional.id, sample_service.id, date(2024, 6, 3), time(9, 0)
        )

        with pytest.raises(DependencyError, match="Deactivate"):
            catalog_service.delete_service(sample_service.id, cascade=True)
