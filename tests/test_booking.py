"""Tests for the appointment lifecycle."""

import threading
from datetime import date, time
from decimal import Decimal

import pytest

from salonbook.domain.entities import AppointmentStatus
from salonbook.domain.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

MONDAY = date(2024, 6, 3)
NEXT_MONDAY = date(2024, 6, 10)

TERMINAL = [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW]


@pytest.fixture
def booked(booking_service, sample_client, sample_professional, sample_service):
    """A scheduled appointment on Monday at 10:00."""
    return booking_service.create_appointment(
        sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(10, 0)
    )


class TestCreateAppointment:
    """Tests for BookingService.create_appointment."""

    def test_creates_scheduled_appointment(self, booked, sample_client, sample_professional, sample_service):
        assert booked.id is not None
        assert booked.user_id == sample_client.id
        assert booked.professional_id == sample_professional.id
        assert booked.service_id == sample_service.id
        assert booked.date == MONDAY
        assert booked.start_time == time(10, 0)
        assert booked.end_time == time(11, 0)
        assert booked.status is AppointmentStatus.SCHEDULED

    def test_booked_start_leaves_available_slots(
        self, booked, availability_service, sample_professional, sample_service
    ):
        slots = availability_service.get_available_slots(sample_professional.id, sample_service.id, MONDAY)

        assert "10:00" not in slots

    def test_stores_notes(self, booking_service, sample_client, sample_professional, sample_service):
        appointment = booking_service.create_appointment(
            sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(9, 0), notes="Bring photo"
        )

        assert booking_service.get_appointment(appointment.id).notes == "Bring photo"

    def test_same_slot_twice_conflicts(self, booked, booking_service, sample_client, sample_professional, sample_service):
        with pytest.raises(ConflictError):
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(10, 0)
            )

    def test_overlapping_slot_conflicts(self, booked, booking_service, sample_client, sample_professional, sample_service):
        with pytest.raises(ConflictError):
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(10, 30)
            )

    def test_back_to_back_slots_allowed(self, booked, booking_service, sample_client, sample_professional, sample_service):
        appointment = booking_service.create_appointment(
            sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(11, 0)
        )

        assert appointment.start_time == time(11, 0)

    def test_service_not_linked_to_professional(
        self, booking_service, catalog_service, sample_client, sample_professional, sample_service
    ):
        manicure = catalog_service.create_service(name="Manicure", duration=45, price=Decimal("25.00"))

        with pytest.raises(ValidationError, match="does not perform"):
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, manicure.id, MONDAY, time(9, 0)
            )

    def test_unknown_user(self, booking_service, sample_professional, sample_service):
        with pytest.raises(NotFoundError, match="User 999"):
            booking_service.create_appointment(999, sample_professional.id, sample_service.id, MONDAY, time(9, 0))

    def test_unknown_reference_is_a_validation_error(self, booking_service, sample_client, sample_service):
        with pytest.raises(ValidationError):
            booking_service.create_appointment(sample_client.id, 999, sample_service.id, MONDAY, time(9, 0))

    def test_inactive_professional(
        self, booking_service, staff_service, sample_client, sample_professional, sample_service
    ):
        staff_service.update_professional(sample_professional.id, active=False)

        with pytest.raises(ValidationError, match="not active"):
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(9, 0)
            )

    def test_inactive_service(self, booking_service, catalog_service, sample_client, sample_professional, sample_service):
        catalog_service.update_service(sample_service.id, active=False)

        with pytest.raises(ValidationError, match="not active"):
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(9, 0)
            )

    def test_day_off(self, booking_service, sample_client, sample_professional, sample_service):
        with pytest.raises(ValidationError, match="does not work"):
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, sample_service.id, date(2024, 6, 4), time(9, 0)
            )

    def test_start_off_grid(self, booking_service, sample_client, sample_professional, sample_service):
        with pytest.raises(ValidationError, match="not a bookable start"):
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(9, 10)
            )

    def test_rejected_booking_logs_warning(
        self, booked, booking_service, sample_client, sample_professional, sample_service, caplog
    ):
        with caplog.at_level("WARNING", logger="salonbook.domain.booking"):
            with pytest.raises(ConflictError):
                booking_service.create_appointment(
                    sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(10, 0)
                )

        assert "slot taken" in caplog.text

    def test_concurrent_requests_for_same_slot(
        self, booking_service, sample_client, sample_professional, sample_service
    ):
        barrier = threading.Barrier(2)
        successes = []
        conflicts = []

        def book():
            barrier.wait()
            try:
                successes.append(
                    booking_service.create_appointment(
                        sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(9, 0)
                    )
                )
            except ConflictError as e:
                conflicts.append(e)

        threads = [threading.Thread(target=book) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(successes) == 1
        assert len(conflicts) == 1
        assert len(booking_service.list_for_date(MONDAY)) == 1


class TestStatusTransitions:
    """Tests for appointment status changes."""

    @pytest.mark.parametrize("target", TERMINAL)
    def test_scheduled_to_terminal(self, booking_service, booked, target):
        updated = booking_service.update_status(booked.id, target)

        assert updated.status is target
        assert booking_service.get_appointment(booked.id).status is target

    def test_accepts_status_string(self, booking_service, booked):
        assert booking_service.update_status(booked.id, "no-show").status is AppointmentStatus.NO_SHOW

    @pytest.mark.parametrize("current", TERMINAL)
    @pytest.mark.parametrize("target", list(AppointmentStatus))
    def test_terminal_states_are_final(self, booking_service, booked, current, target):
        booking_service.update_status(booked.id, current)

        with pytest.raises(InvalidTransitionError):
            booking_service.update_status(booked.id, target)

    def test_scheduled_to_scheduled_rejected(self, booking_service, booked):
        with pytest.raises(InvalidTransitionError):
            booking_service.update_status(booked.id, AppointmentStatus.SCHEDULED)

    def test_unknown_status(self, booking_service, booked):
        with pytest.raises(ValidationError, match="Unknown appointment status"):
            booking_service.update_status(booked.id, "done")

    def test_unknown_appointment(self, booking_service):
        with pytest.raises(NotFoundError):
            booking_service.cancel(999)

    def test_convenience_wrappers(self, booking_service, sample_client, sample_professional, sample_service):
        ids = [
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, sample_service.id, MONDAY, start
            ).id
            for start in (time(9, 0), time(10, 0), time(11, 0))
        ]

        assert booking_service.complete(ids[0]).status is AppointmentStatus.COMPLETED
        assert booking_service.cancel(ids[1]).status is AppointmentStatus.CANCELLED
        assert booking_service.mark_no_show(ids[2]).status is AppointmentStatus.NO_SHOW

    def test_concurrent_status_changes(self, monkeypatch, temp_db, booking_service, booked):
        barrier = threading.Barrier(2)
        read_appointment = temp_db.get_appointment

        def read_then_wait(appointment_id):
            # Both callers see 'scheduled' before either one writes
            appointment = read_appointment(appointment_id)
            barrier.wait(timeout=5)
            return appointment

        monkeypatch.setattr(temp_db, "get_appointment", read_then_wait)
        successes = []
        rejected = []

        def change(action):
            try:
                successes.append(action(booked.id))
            except InvalidTransitionError as e:
                rejected.append(e)

        threads = [
            threading.Thread(target=change, args=(action,))
            for action in (booking_service.complete, booking_service.cancel)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(successes) == 1
        assert len(rejected) == 1
        assert "from 'scheduled'" not in str(rejected[0])
        assert read_appointment(booked.id).status is successes[0].status

    def test_status_change_after_delete(self, monkeypatch, temp_db, booking_service, booked):
        read_appointment = temp_db.get_appointment

        def read_then_delete(appointment_id):
            appointment = read_appointment(appointment_id)
            temp_db.delete_appointment(appointment_id)
            return appointment

        monkeypatch.setattr(temp_db, "get_appointment", read_then_delete)

        with pytest.raises(NotFoundError):
            booking_service.cancel(booked.id)

    def test_cancelling_frees_the_slot(
        self, booking_service, availability_service, booked, sample_professional, sample_service
    ):
        booking_service.cancel(booked.id)

        slots = availability_service.get_available_slots(sample_professional.id, sample_service.id, MONDAY)
        assert "10:00" in slots


class TestReschedule:
    """Tests for BookingService.reschedule."""

    def test_moves_to_free_slot(self, booking_service, booked):
        moved = booking_service.reschedule(booked.id, NEXT_MONDAY, time(9, 30))

        assert moved.id == booked.id
        assert moved.date == NEXT_MONDAY
        assert moved.start_time == time(9, 30)
        assert moved.end_time == time(10, 30)
        assert moved.status is AppointmentStatus.SCHEDULED

    def test_can_overlap_its_own_old_slot(self, booking_service, booked):
        moved = booking_service.reschedule(booked.id, MONDAY, time(10, 30))

        assert moved.start_time == time(10, 30)

    def test_taken_slot(self, booking_service, booked, sample_client, sample_professional, sample_service):
        other = booking_service.create_appointment(
            sample_client.id, sample_professional.id, sample_service.id, MONDAY, time(9, 0)
        )

        with pytest.raises(ConflictError):
            booking_service.reschedule(other.id, MONDAY, time(10, 0))

    def test_inactive_professional(self, booking_service, staff_service, booked, sample_professional):
        staff_service.update_professional(sample_professional.id, active=False)

        with pytest.raises(ValidationError, match="not active"):
            booking_service.reschedule(booked.id, NEXT_MONDAY, time(9, 0))

        assert booking_service.get_appointment(booked.id).date == MONDAY

    def test_inactive_service(self, booking_service, catalog_service, booked, sample_service):
        catalog_service.update_service(sample_service.id, active=False)

        with pytest.raises(ValidationError, match="not active"):
            booking_service.reschedule(booked.id, NEXT_MONDAY, time(9, 0))

    def test_service_no_longer_performed(
        self, booking_service, staff_service, booked, sample_professional, sample_service
    ):
        staff_service.unassign_service(sample_professional.id, sample_service.id)

        with pytest.raises(ValidationError, match="does not perform"):
            booking_service.reschedule(booked.id, MONDAY, time(11, 0))

        assert booking_service.get_appointment(booked.id).start_time == time(10, 0)

    def test_only_scheduled_appointments(self, booking_service, booked):
        booking_service.complete(booked.id)

        with pytest.raises(InvalidTransitionError, match="reschedule"):
            booking_service.reschedule(booked.id, NEXT_MONDAY, time(9, 0))


class TestQueries:
    """Tests for appointment listing, notes and deletion."""

    def test_list_filters(self, booking_service, booked, sample_client, sample_professional, sample_service):
        later = booking_service.create_appointment(
            sample_client.id, sample_professional.id, sample_service.id, NEXT_MONDAY, time(9, 0)
        )
        booking_service.cancel(later.id)

        assert [a.id for a in booking_service.list_for_user(sample_client.id)] == [booked.id, later.id]
        assert [a.id for a in booking_service.list_for_professional(sample_professional.id)] == [booked.id, later.id]
        assert [a.id for a in booking_service.list_for_date(NEXT_MONDAY)] == [later.id]
        assert [a.id for a in booking_service.list_by_status("cancelled")] == [later.id]
        assert booking_service.list_appointments(start_date=NEXT_MONDAY, end_date=NEXT_MONDAY)[0].id == later.id

    def test_list_ordered_by_time(self, booking_service, sample_client, sample_professional, sample_service):
        for start in (time(11, 0), time(9, 0)):
            booking_service.create_appointment(
                sample_client.id, sample_professional.id, sample_service.id, MONDAY, start
            )

        starts = [a.start_time for a in booking_service.list_for_date(MONDAY)]
        assert starts == [time(9, 0), time(11, 0)]

    def test_update_notes(self, booking_service, booked):
        assert booking_service.update_notes(booked.id, "Running late").notes == "Running late"

    def test_delete(self, booking_service, booked):
        booking_service.delete_appointment(booked.id)

        assert booking_service.get_appointment(booked.id) is None
        with pytest.raises(NotFoundError):
            booking_service.delete_appointment(booked.id)
