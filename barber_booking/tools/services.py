"""Service catalog with prices and durations.

Staff can add, edit and remove services. A service stays fixed in duration
while any active booking references it, and cannot be removed until then.
"""

import logging
import re
import threading
from decimal import Decimal
from typing import Optional, TypedDict

from pydantic import ValidationError

from barber_booking.schemas.booking_schema import Service

logger = logging.getLogger(__name__)

_DEFAULT_SERVICES: tuple[Service, ...] = (
    Service(id="haircut", name="Haircut", price=Decimal("35.00"), duration_minutes=30),
    Service(id="beard", name="Beard Trim", price=Decimal("25.00"), duration_minutes=30),
    Service(id="eyebrows", name="Eyebrow Design", price=Decimal("15.00"), duration_minutes=15),
    Service(
        id="haircut-beard", name="Haircut + Beard", price=Decimal("55.00"), duration_minutes=60
    ),
    Service(id="kids-cut", name="Kids Haircut", price=Decimal("30.00"), duration_minutes=45),
    Service(
        id="full-grooming",
        name="Haircut + Beard + Eyebrows",
        price=Decimal("65.00"),
        duration_minutes=75,
    ),
    Service(
        id="coloring", name="Hair Coloring", price=Decimal("120.00"), duration_minutes=120
    ),
)

SERVICE_CATALOG: dict[str, Service] = {service.id: service for service in _DEFAULT_SERVICES}
_lock = threading.Lock()

SERVICE_ALIASES: dict[str, str] = {
    "cut": "haircut", "trim": "haircut", "corte": "haircut",
    "barba": "beard", "shave": "beard",
    "sobrancelha": "eyebrows", "brows": "eyebrows",
    "cut and beard": "haircut-beard", "corte e barba": "haircut-beard",
    "kids": "kids-cut", "child": "kids-cut", "infantil": "kids-cut",
    "full": "full-grooming", "combo": "full-grooming", "completo": "full-grooming",
    "color": "coloring", "dye": "coloring", "platinado": "coloring", "luzes": "coloring",
}


def get_all_services() -> list[Service]:
    """Return the menu ordered by price."""
    return sorted(SERVICE_CATALOG.values(), key=lambda s: (s.price, s.name))


def get_service(service_id: str) -> Optional[Service]:
    return SERVICE_CATALOG.get(service_id)


def match_service(query: str) -> Optional[str]:
    """Match free text to a service ID. Longest alias wins; None if nothing matches."""
    normalized = query.lower().strip()
    if not normalized:
        return None
    if normalized in SERVICE_CATALOG:
        return normalized
    for alias in sorted(SERVICE_ALIASES, key=len, reverse=True):
        if alias in normalized and SERVICE_ALIASES[alias] in SERVICE_CATALOG:
            return SERVICE_ALIASES[alias]
    for sid, service in SERVICE_CATALOG.items():
        if normalized in service.name.lower():
            return sid
    logger.debug("No service matched %r", query)
    return None


class ServiceResult(TypedDict, total=False):
    """Result from create_service, update_service or delete_service."""

    success: bool
    message: str
    service_id: str
    details: Service


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _active_references(service_id: str) -> list[str]:
    """IDs of non-cancelled bookings that use ``service_id``."""
    # Deferred: the booking store resolves services from this module.
    from barber_booking.tools import booking as store

    return [
        b.id for b in store.list_bookings(include_cancelled=False)
        if b.service_id == service_id
    ]


def _validation_message(exc: ValidationError) -> str:
    problems = "; ".join(err["msg"] for err in exc.errors())
    return f"Invalid service details: {problems}."


def create_service(
    name: str,
    price: Decimal,
    duration_minutes: int,
    service_id: Optional[str] = None,
) -> ServiceResult:
    """Add a service to the menu. The ID defaults to a slug of the name."""
    if not name or not name.strip():
        return {"success": False, "message": "Please fill in the service name."}
    service_id = service_id or _slugify(name)
    if not service_id:
        return {"success": False, "message": "Please fill in the service name."}
    try:
        service = Service(
            id=service_id, name=name.strip(), price=price, duration_minutes=duration_minutes
        )
    except ValidationError as exc:
        return {"success": False, "message": _validation_message(exc)}

    with _lock:
        if service.id in SERVICE_CATALOG:
            return {"success": False, "message": f"Service {service.id} already exists."}
        SERVICE_CATALOG[service.id] = service
    logger.info("Service created: %s (%s min)", service.id, service.duration_minutes)
    return {
        "success": True,
        "service_id": service.id,
        "message": f"Service {service.name} created.",
        "details": service,
    }


def update_service(
    service_id: str,
    name: Optional[str] = None,
    price: Optional[Decimal] = None,
    duration_minutes: Optional[int] = None,
) -> ServiceResult:
    """Edit a service. The duration is locked while active bookings use it."""
    current = SERVICE_CATALOG.get(service_id)
    if current is None:
        return {"success": False, "message": f"Service {service_id} not found."}

    changes = {
        key: value
        for key, value in [("name", name), ("price", price), ("duration_minutes", duration_minutes)]
        if value is not None
    }
    if "duration_minutes" in changes and changes["duration_minutes"] != current.duration_minutes:
        booked = _active_references(service_id)
        if booked:
            return {
                "success": False,
                "message": (
                    f"Service {service_id} is used by {len(booked)} active booking(s); "
                    "its duration cannot change."
                ),
            }
    try:
        updated = Service(**{**current.model_dump(), **changes})
    except ValidationError as exc:
        return {"success": False, "message": _validation_message(exc)}

    with _lock:
        SERVICE_CATALOG[service_id] = updated
    logger.info("Service updated: %s %s", service_id, sorted(changes))
    return {
        "success": True,
        "service_id": service_id,
        "message": f"Service {updated.name} updated.",
        "details": updated,
    }


def delete_service(service_id: str) -> ServiceResult:
    """Remove a service that no active booking references."""
    if service_id not in SERVICE_CATALOG:
        return {"success": False, "message": f"Service {service_id} not found."}
    booked = _active_references(service_id)
    if booked:
        return {
            "success": False,
            "message": f"Service {service_id} is used by {len(booked)} active booking(s).",
        }
    with _lock:
        removed = SERVICE_CATALOG.pop(service_id)
    logger.info("Service deleted: %s", service_id)
    return {"success": True, "service_id": service_id, "message": f"Service {removed.name} deleted."}


def reset() -> None:
    """Restore the default menu. Used by test fixtures for isolation."""
    with _lock:
        SERVICE_CATALOG.clear()
        SERVICE_CATALOG.update({service.id: service for service in _DEFAULT_SERVICES})
