import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from freight_engine.config import load_fedex_settings
from freight_engine.errors import ConfigurationError
from freight_engine.schemas import (
    FedExCredentials,
    Location,
    Package,
    PackageRate,
    RateEstimate,
    RateResponse,
    TrackingRecord,
    TrackingResponse,
)
from freight_engine.services.code_tables import (
    normalize_currency,
    service_name_for_code,
    tracking_status_for_code,
    transit_days_for_code,
)
from freight_engine.services.delivery_dates import resolve_delivery, ship_timestamp
from freight_engine.services.fedex_parser import (
    RATE,
    TRACKING,
    FedExResponseParser,
    ParsedRateQuote,
    ParsedTrackDetails,
)
from freight_engine.services.fedex_requests import build_rate_request, build_tracking_request
from freight_engine.services.shipment_events import build_location, reconstruct_events
from freight_engine.services.transport import RequestsTransport, Transport

logger = logging.getLogger(__name__)

NO_RATES_MESSAGE = "No shipping rates could be found for the destination address"


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _minor_units(amount: Optional[Decimal]) -> Optional[int]:
    if amount is None:
        return None
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class FedExService:
    """
    FedEx rate quotes and tracking over the FedEx XML gateway.

    Holds nothing but its configuration, so one instance can serve
    concurrent callers. Every call makes exactly one trip through the
    transport; nothing is cached or retried here.
    """

    name = "FedEx"

    def __init__(
        self,
        key: str,
        password: str,
        account: str,
        meter: Optional[str] = None,
        transport: Optional[Transport] = None,
        clock: Optional[Callable[[], datetime]] = None,
        test_mode: bool = False,
    ):
        missing = [
            field for field, value in (("key", key), ("password", password), ("account", account))
            if not (value or "").strip()
        ]
        if missing:
            raise ConfigurationError(f"FedEx requires {', '.join(missing)}")

        self.credentials = FedExCredentials(key=key, password=password, account=account, meter=meter)
        self.transport = transport or RequestsTransport()
        self.clock = clock or _local_now
        self.test_mode = test_mode

    @classmethod
    def from_env(cls, transport: Optional[Transport] = None) -> "FedExService":
        settings = load_fedex_settings()
        return cls(
            key=settings.key,
            password=settings.password,
            account=settings.account,
            meter=settings.meter,
            transport=transport or RequestsTransport(timeout=settings.timeout),
            test_mode=settings.test_mode,
        )

    def find_rates(
        self,
        origin: Location,
        destination: Location,
        packages: Iterable[Package],
        turn_around_time: Optional[float] = None,
        test: Optional[bool] = None,
        shipper: Optional[Location] = None,
        dropoff_type: str = "regular_pickup",
        packaging_type: str = "your_packaging",
    ) -> RateResponse:
        packages = list(packages)
        now = self.clock()
        request = build_rate_request(
            self.credentials,
            origin,
            destination,
            packages,
            ship_timestamp(now, turn_around_time),
            shipper=shipper,
            dropoff_type=dropoff_type,
            packaging_type=packaging_type,
        )

        logger.info(f"[FedEx] Rating {origin.postal_code} -> {destination.postal_code}, {len(packages)} package(s)")
        body = self._commit(request, test)
        reply = FedExResponseParser.parse(body, kind=RATE)

        rates = tuple(
            self._rate_estimate(quote, packages, now, turn_around_time)
            for quote in reply.quotes
        )
        success, message = reply.success, reply.message
        if not rates:
            success = False
            message = message or NO_RATES_MESSAGE
        if not success:
            logger.warning(f"[FedEx] Rate request failed: {message}")

        return RateResponse(
            success=success,
            message=message,
            params=reply.params,
            xml=body,
            request=request,
            rates=rates,
        )

    def find_tracking_info(
        self,
        tracking_number: str,
        test: Optional[bool] = None,
        package_identifier_type: str = "tracking_number",
        ship_date_range_begin: Optional[str] = None,
        ship_date_range_end: Optional[str] = None,
    ) -> TrackingResponse:
        request = build_tracking_request(
            self.credentials,
            tracking_number,
            package_identifier_type=package_identifier_type,
            ship_date_range_begin=ship_date_range_begin,
            ship_date_range_end=ship_date_range_end,
        )

        logger.info(f"[FedEx] Tracking {tracking_number}")
        body = self._commit(request, test)
        reply = FedExResponseParser.parse(body, kind=TRACKING)
        if not reply.success:
            logger.warning(f"[FedEx] Tracking {tracking_number} failed: {reply.message}")

        record = None
        if reply.details is not None:
            record = self._tracking_record(reply.details, tracking_number)

        return TrackingResponse(
            success=reply.success,
            message=reply.message,
            params=reply.params,
            xml=body,
            request=request,
            record=record,
        )

    def _commit(self, request: str, test: Optional[bool]) -> str:
        test_mode = self.test_mode if test is None else test
        return self.transport.send(request, self.credentials, test_mode)

    def _rate_estimate(
        self,
        quote: ParsedRateQuote,
        packages: list[Package],
        now: datetime,
        turn_around_time: Optional[float],
    ) -> RateEstimate:
        estimate = resolve_delivery(
            now,
            delivery_timestamp=quote.delivery_timestamp,
            transit_days=transit_days_for_code(quote.transit_time),
            max_transit_days=transit_days_for_code(quote.maximum_transit_time),
            turn_around_time=turn_around_time,
        )

        total_price = _minor_units(quote.total_amount)
        if total_price is None:
            logger.warning(f"[FedEx] No total charge quoted for {quote.service_code}")
            total_price = 0

        package_rates = tuple(
            PackageRate(
                package=package,
                rate=_minor_units(quote.package_amounts.get(sequence)),
            )
            for sequence, package in enumerate(packages, start=1)
        )

        return RateEstimate(
            carrier=self.name,
            service_code=quote.service_code,
            service_name=service_name_for_code(quote.service_type),
            currency=normalize_currency(quote.currency),
            total_price=total_price,
            package_rates=package_rates,
            delivery_date=estimate.delivery_date,
            delivery_range=estimate.delivery_range,
        )

    def _tracking_record(self, details: ParsedTrackDetails, tracking_number: str) -> TrackingRecord:
        return TrackingRecord(
            carrier="fedex",
            carrier_name=self.name,
            tracking_number=details.tracking_number or tracking_number,
            status=tracking_status_for_code(details.status_code),
            status_code=details.status_code,
            status_description=details.status_description,
            delivery_signature=details.delivery_signature,
            origin=build_location(details.origin),
            destination=build_location(details.destination),
            shipper_address=build_location(details.shipper) if details.shipper else None,
            ship_time=details.ship_time,
            scheduled_delivery_date=details.estimated_delivery,
            actual_delivery_time=details.actual_delivery,
            shipment_events=reconstruct_events(details.events),
        )
