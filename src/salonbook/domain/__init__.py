"""Domain layer for salonbook.

Services are resolved lazily: the database layer imports
``salonbook.domain.entities`` and the services import the database layer.
"""

_SERVICES = {
    "UserService": "salonbook.domain.user",
    "CatalogService": "salonbook.domain.catalog",
    "StaffService": "salonbook.domain.staff",
    "AvailabilityService": "salonbook.domain.availability",
    "BookingService": "salonbook.domain.booking",
    "LedgerService": "salonbook.domain.ledger",
    "ReportService": "salonbook.domain.reports",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
