import math
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from typing import Optional

from freight_engine.schemas import FedExCredentials, Location, Package

RATE_NAMESPACE = "http://fedex.com/ws/rate/v6"
TRACK_NAMESPACE = "http://fedex.com/ws/track/v3"

CUSTOMER_TRANSACTION_ID = "FreightEngine"

DROPOFF_TYPES = {
    "regular_pickup": "REGULAR_PICKUP",
    "request_courier": "REQUEST_COURIER",
    "dropbox": "DROP_BOX",
    "business_service_center": "BUSINESS_SERVICE_CENTER",
    "station": "STATION",
}

PACKAGING_TYPES = {
    "fedex_envelope": "FEDEX_ENVELOPE",
    "fedex_pak": "FEDEX_PAK",
    "fedex_box": "FEDEX_BOX",
    "fedex_tube": "FEDEX_TUBE",
    "fedex_10_kg_box": "FEDEX_10KG_BOX",
    "fedex_25_kg_box": "FEDEX_25KG_BOX",
    "your_packaging": "YOUR_PACKAGING",
}

PACKAGE_IDENTIFIER_TYPES = {
    "tracking_number": "TRACKING_NUMBER_OR_DOORTAG",
    "door_tag": "TRACKING_NUMBER_OR_DOORTAG",
    "rma": "RMA",
    "ground_shipment_id": "GROUND_SHIPMENT_ID",
    "ground_invoice_number": "GROUND_INVOICE_NUMBER",
    "ground_customer_reference": "GROUND_CUSTOMER_REFERENCE",
    "ground_po": "GROUND_PO",
    "express_reference": "EXPRESS_REFERENCE",
    "express_mps_master": "EXPRESS_MPS_MASTER",
}

MINIMUM_WEIGHT = 0.1


def _sub(parent: ET.Element, tag: str, text: Optional[object] = None) -> ET.Element:
    node = ET.SubElement(parent, tag)
    if text is not None:
        node.text = str(text)
    return node


def _lookup(table: dict[str, str], value: str) -> str:
    # Accept either our friendly key or FedEx's own enumeration value
    return table.get(value, value)


def _append_header(root: ET.Element, credentials: FedExCredentials) -> None:
    auth = _sub(root, "WebAuthenticationDetail")
    user = _sub(auth, "UserCredential")
    _sub(user, "Key", credentials.key)
    _sub(user, "Password", credentials.password)

    client = _sub(root, "ClientDetail")
    _sub(client, "AccountNumber", credentials.account)
    if credentials.meter:
        _sub(client, "MeterNumber", credentials.meter)

    transaction = _sub(root, "TransactionDetail")
    _sub(transaction, "CustomerTransactionId", CUSTOMER_TRANSACTION_ID)


def _append_version(root: ET.Element, service_id: str, major: int) -> None:
    version = _sub(root, "Version")
    _sub(version, "ServiceId", service_id)
    _sub(version, "Major", major)
    _sub(version, "Intermediate", 0)
    _sub(version, "Minor", 0)


def _append_location(parent: ET.Element, name: str, location: Location) -> None:
    address = _sub(_sub(parent, name), "Address")
    _sub(address, "PostalCode", location.postal_code)
    _sub(address, "CountryCode", location.country)
    if not location.is_commercial:
        _sub(address, "Residential", "true")


def _append_package(parent: ET.Element, package: Package) -> None:
    requested = _sub(parent, "RequestedPackages")

    weight = _sub(requested, "Weight")
    _sub(weight, "Units", package.weight_units)
    _sub(weight, "Value", max(round(package.weight, 3), MINIMUM_WEIGHT))

    dimensions = _sub(requested, "Dimensions")
    for axis in ("length", "width", "height"):
        # FedEx only takes whole units
        _sub(dimensions, axis.capitalize(), math.ceil(round(getattr(package, axis), 3)))
    _sub(dimensions, "Units", package.dimension_units)


def build_rate_request(
    credentials: FedExCredentials,
    origin: Location,
    destination: Location,
    packages: Sequence[Package],
    ship_timestamp: str,
    shipper: Optional[Location] = None,
    dropoff_type: str = "regular_pickup",
    packaging_type: str = "your_packaging",
) -> str:
    root = ET.Element("RateRequest", xmlns=RATE_NAMESPACE)
    _append_header(root, credentials)
    _append_version(root, "crs", 6)

    # Ask for delivery dates and Saturday delivery options
    _sub(root, "ReturnTransitAndCommit", "true")
    _sub(root, "VariableOptions", "SATURDAY_DELIVERY")

    shipment = _sub(root, "RequestedShipment")
    _sub(shipment, "ShipTimestamp", ship_timestamp)
    _sub(shipment, "DropoffType", _lookup(DROPOFF_TYPES, dropoff_type))
    _sub(shipment, "PackagingType", _lookup(PACKAGING_TYPES, packaging_type))
    _append_location(shipment, "Shipper", shipper or origin)
    _append_location(shipment, "Recipient", destination)
    if shipper is not None and shipper != origin:
        _append_location(shipment, "Origin", origin)
    _sub(shipment, "RateRequestTypes", "ACCOUNT")
    _sub(shipment, "PackageCount", len(packages))
    for package in packages:
        _append_package(shipment, package)

    return ET.tostring(root, encoding="unicode")


def build_tracking_request(
    credentials: FedExCredentials,
    tracking_number: str,
    package_identifier_type: str = "tracking_number",
    ship_date_range_begin: Optional[str] = None,
    ship_date_range_end: Optional[str] = None,
) -> str:
    root = ET.Element("TrackRequest", xmlns=TRACK_NAMESPACE)
    _append_header(root, credentials)
    _append_version(root, "trck", 3)

    identifier = _sub(root, "PackageIdentifier")
    _sub(identifier, "Value", tracking_number)
    _sub(identifier, "Type", _lookup(PACKAGE_IDENTIFIER_TYPES, package_identifier_type))

    if ship_date_range_begin:
        _sub(root, "ShipDateRangeBegin", ship_date_range_begin)
    if ship_date_range_end:
        _sub(root, "ShipDateRangeEnd", ship_date_range_end)
    _sub(root, "IncludeDetailedScans", 1)

    return ET.tostring(root, encoding="unicode")
