"""Service catalog domain service."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from salonbook.database.base import Database
from salonbook.domain.entities import Service
from salonbook.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    delete_blocked,
    entity_not_found,
)
from salonbook.utils.amount_parser import check_money

logger = logging.getLogger(__name__)


def validate_duration(duration: int) -> int:
    """Return duration if it is a positive whole number of minutes."""
    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        raise ValidationError(f"Service duration must be a positive number of minutes, got {duration!r}")
    return duration


def validate_price(price: Decimal | int | str) -> Decimal:
    """Return price as a Decimal if it is non-negative."""
    try:
        value = Decimal(str(price))
    except InvalidOperation:
        raise ValidationError(f"Service price must be a number, got {price!r}")
    if not value.is_finite() or value < 0:
        raise ValidationError(f"Service price cannot be negative, got {price}")
    try:
        return check_money(value)
    except ValueError as e:
        raise ValidationError(f"Invalid service price: {e}")


class CatalogService:
    """Service for managing the bookable services of the salon."""

    def __init__(self, db: Database):
        """Initialize catalog service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_service(
        self,
        name: str,
        duration: int,
        price: Decimal | int | str,
        description: Optional[str] = None,
        active: bool = True,
    ) -> Service:
        """Create a service.

        Args:
            name: Display name
            duration: Length in minutes, must be positive
            price: Non-negative price
            description: Optional description
            active: Whether the service can be booked

        Raises:
            ValidationError: If name is blank, duration or price is invalid
        """
        if not name or not name.strip():
            raise ValidationError("Service name is required")
        service = self.db.create_service(
            name=name,
            duration=validate_duration(duration),
            price=validate_price(price),
            description=description,
            active=active,
        )
        logger.info("Created service %s (%s, %d min)", service.id, service.name, service.duration)
        return service

    def get_service(self, service_id: int) -> Optional[Service]:
        return self.db.get_service(service_id)

    def require_service(self, service_id: int) -> Service:
        """Get service by ID or raise NotFoundError."""
        service = self.db.get_service(service_id)
        if service is None:
            raise NotFoundError(entity_not_found("Service", service_id))
        return service

    def list_services(self, active_only: bool = False) -> list[Service]:
        return self.db.list_services(active_only=active_only)

    def update_service(self, service_id: int, **changes: Any) -> Service:
        """Merge changes into a service.

        Raises:
            NotFoundError: If service doesn't exist
            ValidationError: If the new duration, price or name is invalid
        """
        self.require_service(service_id)
        if "name" in changes and (not changes["name"] or not changes["name"].strip()):
            raise ValidationError("Service name is required")
        if "duration" in changes:
            changes["duration"] = validate_duration(changes["duration"])
        if "price" in changes:
            changes["price"] = validate_price(changes["price"])
        return self.db.update_service(service_id, **changes)

    def delete_service(self, service_id: int, cascade: bool = False) -> None:
        """Delete a service.

        Args:
            service_id: Service ID to delete
            cascade: Also remove professional links to this service

        Raises:
            NotFoundError: If service doesn't exist
            DependencyError: If appointments reference the service, or links
                exist and cascade is False
        """
        self.require_service(service_id)

        appointment_count = len(self.db.list_appointments(service_id=service_id))
        if appointment_count:
            raise DependencyError(
                delete_blocked(
                    "Service",
                    service_id,
                    {"appointment": appointment_count},
                    hint="Deactivate the service instead.",
                )
            )

        links = self.db.list_professional_service_links(service_id=service_id)
        if links and not cascade:
            raise DependencyError(
                delete_blocked("Service", service_id, {"professional link": len(links)})
            )
        for link in links:
            self.db.delete_professional_service(link.professional_id, link.service_id)

        self.db.delete_service(service_id)
        logger.info("Deleted service %s (%d links removed)", service_id, len(links))
