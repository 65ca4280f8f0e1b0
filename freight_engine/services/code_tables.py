from types import MappingProxyType
from typing import Optional

from freight_engine.schemas import TrackingStatus

# FedEx quotes a few currencies under non-ISO codes
CURRENCY_CODES = MappingProxyType({
    "UKL": "GBP",  # UK pound
    "SID": "SGD",  # Singapore dollar
})

SERVICE_TYPES = MappingProxyType({
    "PRIORITY_OVERNIGHT": "FedEx Priority Overnight",
    "PRIORITY_OVERNIGHT_SATURDAY_DELIVERY": "FedEx Priority Overnight Saturday Delivery",
    "FEDEX_2_DAY": "FedEx 2 Day",
    "FEDEX_2_DAY_SATURDAY_DELIVERY": "FedEx 2 Day Saturday Delivery",
    "STANDARD_OVERNIGHT": "FedEx Standard Overnight",
    "FIRST_OVERNIGHT": "FedEx First Overnight",
    "FIRST_OVERNIGHT_SATURDAY_DELIVERY": "FedEx First Overnight Saturday Delivery",
    "FEDEX_EXPRESS_SAVER": "FedEx Express Saver",
    "FEDEX_1_DAY_FREIGHT": "FedEx 1 Day Freight",
    "FEDEX_1_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 1 Day Freight Saturday Delivery",
    "FEDEX_2_DAY_FREIGHT": "FedEx 2 Day Freight",
    "FEDEX_2_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 2 Day Freight Saturday Delivery",
    "FEDEX_3_DAY_FREIGHT": "FedEx 3 Day Freight",
    "FEDEX_3_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 3 Day Freight Saturday Delivery",
    "INTERNATIONAL_PRIORITY": "FedEx International Priority",
    "INTERNATIONAL_PRIORITY_SATURDAY_DELIVERY": "FedEx International Priority Saturday Delivery",
    "INTERNATIONAL_ECONOMY": "FedEx International Economy",
    "INTERNATIONAL_FIRST": "FedEx International First",
    "INTERNATIONAL_PRIORITY_FREIGHT": "FedEx International Priority Freight",
    "INTERNATIONAL_ECONOMY_FREIGHT": "FedEx International Economy Freight",
    "GROUND_HOME_DELIVERY": "FedEx Ground Home Delivery",
    "FEDEX_GROUND": "FedEx Ground",
    "INTERNATIONAL_GROUND": "FedEx International Ground",
    "SMART_POST": "FedEx SmartPost",
    "FEDEX_FREIGHT_PRIORITY": "FedEx Freight Priority",
    "FEDEX_FREIGHT_ECONOMY": "FedEx Freight Economy",
})

# FedEx Tracking Service WSDL status codes; every delay is an exception
TRACKING_STATUS_CODES = MappingProxyType({
    "AA": TrackingStatus.AT_AIRPORT,
    "AD": TrackingStatus.AT_DELIVERY,
    "AF": TrackingStatus.AT_FEDEX_FACILITY,
    "AR": TrackingStatus.AT_FEDEX_FACILITY,
    "AP": TrackingStatus.AT_PICKUP,
    "CA": TrackingStatus.CANCELED,
    "CH": TrackingStatus.LOCATION_CHANGED,
    "DE": TrackingStatus.EXCEPTION,
    "DL": TrackingStatus.DELIVERED,
    "DP": TrackingStatus.DEPARTED_FEDEX_LOCATION,
    "DR": TrackingStatus.VEHICLE_FURNISHED_NOT_USED,
    "DS": TrackingStatus.VEHICLE_DISPATCHED,
    "DY": TrackingStatus.EXCEPTION,
    "EA": TrackingStatus.EXCEPTION,
    "ED": TrackingStatus.ENROUTE_TO_DELIVERY,
    "EO": TrackingStatus.ENROUTE_TO_ORIGIN_AIRPORT,
    "EP": TrackingStatus.ENROUTE_TO_PICKUP,
    "FD": TrackingStatus.AT_FEDEX_DESTINATION,
    "HL": TrackingStatus.HELD_AT_LOCATION,
    "IT": TrackingStatus.IN_TRANSIT,
    "LO": TrackingStatus.LEFT_ORIGIN,
    "OC": TrackingStatus.ORDER_CREATED,
    "OD": TrackingStatus.OUT_FOR_DELIVERY,
    "PF": TrackingStatus.PLANE_IN_FLIGHT,
    "PL": TrackingStatus.PLANE_LANDED,
    "PU": TrackingStatus.PICKED_UP,
    "RS": TrackingStatus.RETURN_TO_SHIPPER,
    "SE": TrackingStatus.EXCEPTION,
    "SF": TrackingStatus.AT_SORT_FACILITY,
    "SP": TrackingStatus.SPLIT_STATUS,
    "TR": TrackingStatus.TRANSFER,
})

TRANSIT_TIMES = (
    "UNKNOWN", "ONE_DAY", "TWO_DAYS", "THREE_DAYS", "FOUR_DAYS", "FIVE_DAYS",
    "SIX_DAYS", "SEVEN_DAYS", "EIGHT_DAYS", "NINE_DAYS", "TEN_DAYS",
    "ELEVEN_DAYS", "TWELVE_DAYS", "THIRTEEN_DAYS", "FOURTEEN_DAYS",
    "FIFTEEN_DAYS", "SIXTEEN_DAYS", "SEVENTEEN_DAYS", "EIGHTEEN_DAYS",
)

BRAND_TOKENS = MappingProxyType({"fedex": "FedEx"})


def normalize_currency(raw_code: str) -> str:
    return CURRENCY_CODES.get(raw_code.strip().upper(), raw_code)


def service_name_for_code(raw_code: str) -> str:
    """
    Readable name for a FedEx service type.

    Codes missing from SERVICE_TYPES are spelled out from their tokens,
    e.g. SOME_WEIRD_RATE -> "Some Weird Rate".
    """
    if raw_code in SERVICE_TYPES:
        return SERVICE_TYPES[raw_code]
    tokens = [token.lower() for token in raw_code.split("_") if token]
    return " ".join(BRAND_TOKENS.get(token, token.title()) for token in tokens)


def tracking_status_for_code(status_code: Optional[str]) -> TrackingStatus:
    return TRACKING_STATUS_CODES.get((status_code or "").strip().upper(), TrackingStatus.UNKNOWN)


def transit_days_for_code(transit_code: Optional[str]) -> Optional[int]:
    """FIVE_DAYS -> 5. None for UNKNOWN and anything FedEx doesn't enumerate."""
    code = (transit_code or "").strip().upper()
    if code not in TRANSIT_TIMES[1:]:
        return None
    return TRANSIT_TIMES.index(code)
