"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only care that the input was rejected.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(ValidationError):
    """Referenced entity does not exist."""


class ConflictError(DomainError):
    """Requested appointment slot is already taken."""


class ReferentialIntegrityError(DomainError):
    """A join or derived lookup hit a reference to a deleted record."""


class InvalidTransitionError(DomainError):
    """Appointment status change not allowed by the state machine."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def entity_not_found(kind: str, entity_id: int) -> str:
    """Return message for a missing entity."""
    return f"{kind} {entity_id} not found"


def duplicate_value(kind: str, field: str, value: object) -> str:
    """Return message for a unique-key violation."""
    return f"{kind} with {field} '{value}' already exists"


def dangling_reference(kind: str, entity_id: int, owner: str) -> str:
    """Return message for a join row pointing at a deleted record."""
    return f"{owner} references {kind.lower()} {entity_id}, which no longer exists"


def slot_taken(professional_id: int, day: object, start: str) -> str:
    """Return message for a double-booked slot."""
    return f"Professional {professional_id} is already booked on {day} at {start}"


def delete_blocked(
    kind: str, entity_id: int, counts: dict[str, int], hint: str = "Please remove them first."
) -> str:
    """Return message when an entity still has dependent rows."""
    parts = [
        f"{count} {label}{'s' if count != 1 else ''}"
        for label, count in counts.items()
        if count > 0
    ]
    return f"Cannot delete {kind.lower()} {entity_id}: it has {', '.join(parts)}. {hint}"


def invalid_transition(appointment_id: int, current: str, target: str) -> str:
    """Return message for a status change the state machine forbids."""
    return f"Cannot change appointment {appointment_id} from '{current}' to '{target}'"
