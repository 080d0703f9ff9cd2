"""Tests for user management."""

from datetime import date, time

import pytest

from salonbook.domain.entities import Role
from salonbook.domain.errors import DependencyError, NotFoundError, ValidationError


def test_create_client_by_default(user_service):
    user = user_service.create_user(username="ana", password="pw", name="Ana", email="ana@x.com")

    assert user.role is Role.CLIENT
    assert user_service.get_user_by_username("ana") == user


def test_create_admin_from_string(user_service):
    user = user_service.create_user(username="boss", password="pw", name="Boss", email="b@x.com", role="admin")

    assert user.is_admin


def test_unknown_role(user_service):
    with pytest.raises(ValidationError, match="Unknown role"):
        user_service.create_user(username="x", password="pw", name="X", email="x@x.com", role="owner")


@pytest.mark.parametrize("field", ["username", "password", "name", "email"])
def test_required_fields(user_service, field):
    values = {"username": "ana", "password": "pw", "name": "Ana", "email": "ana@x.com"}
    values[field] = " "

    with pytest.raises(ValidationError, match=f"User {field} is required"):
        user_service.create_user(**values)


def test_duplicate_username_and_email(user_service, sample_client):
    with pytest.raises(ValidationError, match="username 'ana' already exists"):
        user_service.create_user(username="ana", password="pw", name="Other", email="other@x.com")
    with pytest.raises(ValidationError, match="email"):
        user_service.create_user(username="other", password="pw", name="Other", email="ana@example.com")


def test_list_users_by_role(user_service, sample_client):
    admin = user_service.create_user(username="boss", password="pw", name="Boss", email="b@x.com", role=Role.ADMIN)

    assert [u.id for u in user_service.list_users()] == [sample_client.id, admin.id]
    assert [u.id for u in user_service.list_users(role="admin")] == [admin.id]


def test_update_user(user_service, sample_client):
    updated = user_service.update_user(sample_client.id, instagram="@ana", phone="11 90000-0000")

    assert updated.instagram == "@ana"
    assert updated.phone == "11 90000-0000"
    assert updated.email == sample_client.email


def test_update_keeps_own_email(user_service, sample_client):
    updated = user_service.update_user(sample_client.id, email=sample_client.email, name="Ana S.")

    assert updated.name == "Ana S."


def test_update_rejects_taken_username(user_service, sample_client):
    other = user_service.create_user(username="bia", password="pw", name="Bia", email="bia@x.com")

    with pytest.raises(ValidationError, match="already exists"):
        user_service.update_user(other.id, username="ana")


def test_update_missing_user(user_service):
    with pytest.raises(NotFoundError):
        user_service.update_user(99, name="x")


def test_delete_user(user_service, sample_client):
    user_service.delete_user(sample_client.id)

    assert user_service.get_user(sample_client.id) is None


def test_delete_user_with_appointments_blocked(
    user_service, booking_service, sample_client, sample_professional, sample_service
):
    booking_service.create_appointment(
        sample_client.id, sample_professional.id, sample_service.id, date(2024, 6, 3), time(9, 0)
    )

    with pytest.raises(DependencyError, match="1 appointment"):
        user_service.delete_user(sample_client.id)
