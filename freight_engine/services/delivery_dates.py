"""
Delivery date inference for rate quotes.

FedEx either states a delivery date outright or reports a transit time in
business days. The explicit date always wins; a transit time is counted
from the ship date, which is "now" pushed out by the caller's turn-around
time. The same turn-around offset produces the ShipTimestamp sent in the
rate request, so quote and estimate agree.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from freight_engine.services.business_calendar import business_days_from


@dataclass(frozen=True)
class ExplicitTimestamp:
    delivery: date


@dataclass(frozen=True)
class TransitDays:
    minimum: int
    maximum: int


@dataclass(frozen=True)
class NoEstimate:
    pass


DeliverySource = Union[ExplicitTimestamp, TransitDays, NoEstimate]


@dataclass(frozen=True)
class DeliveryEstimate:
    delivery_date: Optional[date] = None
    delivery_range: Optional[tuple[date, date]] = None


def _as_utc(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _turn_around(turn_around_time: Optional[float]) -> timedelta:
    return timedelta(hours=turn_around_time or 0)


def ship_timestamp(now: datetime, turn_around_time: Optional[float] = None) -> str:
    """ISO-8601 ShipTimestamp with explicit offset, whole seconds."""
    shipped = _as_utc(now) + _turn_around(turn_around_time)
    return shipped.replace(microsecond=0).isoformat()


def ship_date(now: datetime, turn_around_time: Optional[float] = None) -> date:
    return (now + _turn_around(turn_around_time)).date()


def delivery_source(
    delivery_timestamp: Optional[Union[date, datetime]] = None,
    transit_days: Optional[int] = None,
    max_transit_days: Optional[int] = None,
) -> DeliverySource:
    # first match wins: carrier-stated date, then transit time, then nothing
    if delivery_timestamp is not None:
        if isinstance(delivery_timestamp, datetime):
            return ExplicitTimestamp(delivery_timestamp.date())
        return ExplicitTimestamp(delivery_timestamp)
    if transit_days is not None:
        return TransitDays(transit_days, max(transit_days, max_transit_days or transit_days))
    return NoEstimate()


def resolve_delivery(
    now: datetime,
    delivery_timestamp: Optional[Union[date, datetime]] = None,
    transit_days: Optional[int] = None,
    max_transit_days: Optional[int] = None,
    turn_around_time: Optional[float] = None,
) -> DeliveryEstimate:
    source = delivery_source(delivery_timestamp, transit_days, max_transit_days)

    if isinstance(source, ExplicitTimestamp):
        return DeliveryEstimate(source.delivery, (source.delivery, source.delivery))

    if isinstance(source, TransitDays):
        shipped_on = ship_date(now, turn_around_time)
        earliest = business_days_from(shipped_on, source.minimum)
        latest = business_days_from(shipped_on, source.maximum)
        return DeliveryEstimate(earliest, (earliest, latest))

    return DeliveryEstimate()
