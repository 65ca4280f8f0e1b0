import logging
from collections.abc import Iterable
from typing import Optional

from freight_engine.schemas import UNKNOWN_COUNTRY, UNKNOWN_REGION, Location, ShipmentEvent
from freight_engine.services.fedex_parser import ParsedEventRecord

logger = logging.getLogger(__name__)


def build_location(address: Optional[dict[str, str]]) -> Location:
    """Location from a parsed address, with placeholders for every missing part."""
    address = address or {}
    return Location(
        city=address.get("city") or UNKNOWN_REGION,
        state=address.get("state") or UNKNOWN_REGION,
        postal_code=address.get("postal_code") or "",
        country=address.get("country") or UNKNOWN_COUNTRY,
    )


def resolve_event_location(address: Optional[dict[str, str]]) -> Optional[Location]:
    # Scans without a country are notices ("Shipment information sent
    # to FedEx"), not movements of the package.
    if not address or not address.get("country"):
        return None
    return build_location(address)


def reconstruct_events(records: Iterable[ParsedEventRecord]) -> tuple[ShipmentEvent, ...]:
    """
    Builds the shipment timeline: located events only, oldest first.

    sorted() is stable, so events sharing a timestamp keep payload order.
    """
    events = []
    for record in records:
        location = resolve_event_location(record.address)
        if location is None:
            logger.debug(f"[FedEx] Dropping unlocated event {record.description!r}")
            continue
        if record.timestamp is None:
            logger.warning(f"[FedEx] Dropping event without timestamp {record.description!r}")
            continue
        events.append(ShipmentEvent(
            name=record.description,
            time=record.timestamp,
            location=location,
            type_code=record.type_code,
        ))
    return tuple(sorted(events, key=lambda event: event.time))
