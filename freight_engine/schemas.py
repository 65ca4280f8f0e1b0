# schemas.py
from datetime import date, datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_REGION = "unknown"
UNKNOWN_COUNTRY = "ZZ"  # ISO 3166 user-assigned, "Unknown or Invalid Territory"


class TrackingStatus(str, Enum):
    DELIVERED = "delivered"
    IN_TRANSIT = "in_transit"
    EXCEPTION = "exception"
    UNKNOWN = "unknown"
    AT_AIRPORT = "at_airport"
    AT_DELIVERY = "at_delivery"
    AT_FEDEX_FACILITY = "at_fedex_facility"
    AT_FEDEX_DESTINATION = "at_fedex_destination"
    AT_PICKUP = "at_pickup"
    AT_SORT_FACILITY = "at_sort_facility"
    CANCELED = "canceled"
    DEPARTED_FEDEX_LOCATION = "departed_fedex_location"
    ENROUTE_TO_DELIVERY = "enroute_to_delivery"
    ENROUTE_TO_ORIGIN_AIRPORT = "enroute_to_origin_airport"
    ENROUTE_TO_PICKUP = "enroute_to_pickup"
    HELD_AT_LOCATION = "held_at_location"
    LEFT_ORIGIN = "left_origin"
    LOCATION_CHANGED = "location_changed"
    ORDER_CREATED = "order_created"
    OUT_FOR_DELIVERY = "out_for_delivery"
    PICKED_UP = "picked_up"
    PLANE_IN_FLIGHT = "plane_in_flight"
    PLANE_LANDED = "plane_landed"
    RETURN_TO_SHIPPER = "return_to_shipper"
    SPLIT_STATUS = "split_status"
    TRANSFER = "transfer"
    VEHICLE_DISPATCHED = "vehicle_dispatched"
    VEHICLE_FURNISHED_NOT_USED = "vehicle_furnished_not_used"


class Location(BaseModel):
    """
    A postal location.

    Parsed locations never carry None: missing parts are filled with the
    "unknown"/"ZZ" placeholders so callers can read any field blindly.
    """
    model_config = ConfigDict(frozen=True)

    city: str = UNKNOWN_REGION
    state: str = UNKNOWN_REGION
    postal_code: str = ""
    country: str = UNKNOWN_COUNTRY
    address_type: Optional[Literal["residential", "commercial"]] = None

    @classmethod
    def unknown(cls) -> "Location":
        return cls()

    @property
    def is_unknown(self) -> bool:
        return (
            self.city == UNKNOWN_REGION
            and self.state == UNKNOWN_REGION
            and self.country == UNKNOWN_COUNTRY
        )

    @property
    def is_commercial(self) -> bool:
        return self.address_type == "commercial"


class Package(BaseModel):
    model_config = ConfigDict(frozen=True)

    weight: float = Field(..., gt=0, description="Package weight in weight_units")
    length: float = Field(0, ge=0)
    width: float = Field(0, ge=0)
    height: float = Field(0, ge=0)
    weight_units: Literal["LB", "KG"] = "LB"
    dimension_units: Literal["IN", "CM"] = "IN"


class PackageRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    package: Package
    rate: Optional[int] = Field(None, description="Per-package charge in minor units, when quoted")


class RateEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    carrier: str
    service_code: str
    service_name: str
    currency: str = Field(..., description="ISO-4217 code")
    total_price: int = Field(..., description="Minor currency units")
    package_rates: tuple[PackageRate, ...] = ()
    delivery_date: Optional[date] = None
    delivery_range: Optional[tuple[date, date]] = None

    @property
    def price(self) -> int:
        return self.total_price

    @property
    def packages(self) -> list[Package]:
        return [package_rate.package for package_rate in self.package_rates]


class ShipmentEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    time: datetime
    location: Location
    type_code: Optional[str] = None


class TrackingRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    carrier: str = "fedex"
    carrier_name: str = "FedEx"
    tracking_number: str
    status: TrackingStatus = TrackingStatus.UNKNOWN
    status_code: str = ""
    status_description: str = ""
    delivery_signature: Optional[str] = None
    origin: Location = Field(default_factory=Location.unknown)
    destination: Location = Field(default_factory=Location.unknown)
    # None means the carrier sent no shipper at all, unlike the placeholder
    shipper_address: Optional[Location] = None
    ship_time: Optional[datetime] = None
    scheduled_delivery_date: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None
    shipment_events: tuple[ShipmentEvent, ...] = ()

    @property
    def delivered(self) -> bool:
        return self.status == TrackingStatus.DELIVERED


class RateResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str = ""
    params: dict[str, Any] = Field(default_factory=dict)
    xml: str = ""
    request: Optional[str] = None
    rates: tuple[RateEstimate, ...] = ()


class TrackingResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str = ""
    params: dict[str, Any] = Field(default_factory=dict)
    xml: str = ""
    request: Optional[str] = None
    record: Optional[TrackingRecord] = None

    @property
    def delivered(self) -> bool:
        return self.record is not None and self.record.delivered


class FedExCredentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    password: str = Field(..., repr=False)
    account: str
    meter: Optional[str] = None


class RateQuery(BaseModel):
    origin: Location
    destination: Location
    packages: list[Package] = Field(..., min_length=1)
    turn_around_time: Optional[float] = Field(None, ge=0, description="Handling hours before pickup")
