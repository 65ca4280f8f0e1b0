import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import dateutil.parser

from freight_engine.errors import ResponseContentError

logger = logging.getLogger(__name__)

RATE = "rate"
TRACKING = "tracking"

REPLY_ELEMENTS = {
    RATE: "RateReply",
    TRACKING: "TrackReply",
}

SUCCESS_SEVERITIES = ("SUCCESS", "WARNING", "NOTE")

ADDRESS_FIELDS = {
    "city": "City",
    "state": "StateOrProvinceCode",
    "postal_code": "PostalCode",
    "country": "CountryCode",
}


@dataclass
class ParsedRateQuote:
    service_code: str
    service_type: str
    currency: str
    total_amount: Optional[Decimal] = None
    delivery_timestamp: Optional[datetime] = None
    transit_time: Optional[str] = None
    maximum_transit_time: Optional[str] = None
    package_amounts: dict[int, Optional[Decimal]] = field(default_factory=dict)


@dataclass
class ParsedEventRecord:
    description: str
    timestamp: Optional[datetime]
    type_code: Optional[str] = None
    address: Optional[dict[str, str]] = None


@dataclass
class ParsedTrackDetails:
    tracking_number: str = ""
    status_code: str = ""
    status_description: str = ""
    delivered: bool = False
    delivery_signature: Optional[str] = None
    origin: Optional[dict[str, str]] = None
    destination: Optional[dict[str, str]] = None
    shipper: Optional[dict[str, str]] = None
    ship_time: Optional[datetime] = None
    estimated_delivery: Optional[datetime] = None
    actual_delivery: Optional[datetime] = None
    events: list[ParsedEventRecord] = field(default_factory=list)


@dataclass
class ParsedReply:
    kind: str
    success: bool
    message: str
    params: dict[str, Any]


@dataclass
class ParsedRateReply(ParsedReply):
    quotes: list[ParsedRateQuote] = field(default_factory=list)


@dataclass
class ParsedTrackReply(ParsedReply):
    details: Optional[ParsedTrackDetails] = None


def _strip_namespaces(root: ET.Element) -> None:
    for element in root.iter():
        if isinstance(element.tag, str) and "}" in element.tag:
            element.tag = element.tag.split("}", 1)[1]


def _text(node: Optional[ET.Element], path: str) -> Optional[str]:
    if node is None:
        return None
    found = node.find(path)
    if found is None or found.text is None:
        return None
    value = found.text.strip()
    return value or None


def _decimal(raw: Optional[str]) -> Optional[Decimal]:
    if raw is None:
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        logger.warning(f"[FedEx] Ignoring non-numeric amount {raw!r}")
        return None


def _to_utc(value: datetime) -> datetime:
    # Naive carrier timestamps are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(raw: Optional[str], utc: bool = True) -> Optional[datetime]:
    """
    Parses a carrier timestamp. Returns None when missing or unreadable.

    With utc=False the carrier's own offset is kept, which matters when
    only the calendar date is wanted.
    """
    if not raw:
        return None
    try:
        parsed = dateutil.parser.isoparse(raw)
    except (ValueError, OverflowError):
        logger.warning(f"[FedEx] Unreadable timestamp {raw!r}")
        return None
    return _to_utc(parsed) if utc else parsed


def _to_params(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        return (element.text or "").strip() or None

    params: dict[str, Any] = {}
    for child in children:
        value = _to_params(child)
        if child.tag not in params:
            params[child.tag] = value
        elif isinstance(params[child.tag], list):
            params[child.tag].append(value)
        else:
            params[child.tag] = [params[child.tag], value]
    return params


def _address(node: Optional[ET.Element]) -> Optional[dict[str, str]]:
    if node is None:
        return None
    address = {}
    for key, tag in ADDRESS_FIELDS.items():
        value = _text(node, tag)
        if value is not None:
            address[key] = value
    return address


def _first_address(node: ET.Element, *tags: str) -> Optional[dict[str, str]]:
    # First element present wins, however sparse; gaps become placeholders later
    for tag in tags:
        found = node.find(tag)
        if found is not None:
            return _address(found)
    return None


def _package_amounts(shipment_rate: Optional[ET.Element]) -> dict[int, Optional[Decimal]]:
    """Net charge per package, keyed by the 1-based package sequence number."""
    amounts: dict[int, Optional[Decimal]] = {}
    if shipment_rate is None:
        return amounts
    for position, rated in enumerate(shipment_rate.findall("RatedPackages"), start=1):
        sequence = _text(rated, "SequenceNumber") or _text(rated, "GroupNumber")
        try:
            key = int(sequence) if sequence is not None else position
        except ValueError:
            logger.debug(f"[FedEx] Unreadable package sequence {sequence!r}, using position {position}")
            key = position
        amounts[key] = _decimal(_text(rated, "PackageRateDetail/NetCharge/Amount"))
    return amounts


def _locate_reply(root: ET.Element, kind: Optional[str], body: str) -> tuple[str, ET.Element]:
    wanted = [kind] if kind else list(REPLY_ELEMENTS)
    for reply_kind in wanted:
        tag = REPLY_ELEMENTS[reply_kind]
        if root.tag == tag:
            return reply_kind, root
        # SOAP envelopes and other wrappers carry the reply further down
        nested = root.find(f".//{tag}")
        if nested is not None:
            return reply_kind, nested
    expected = " or ".join(REPLY_ELEMENTS[reply_kind] for reply_kind in wanted)
    raise ResponseContentError(f"Expected a FedEx {expected} document, got <{root.tag}>", body)


class FedExResponseParser:
    @staticmethod
    def parse(body: str, kind: Optional[str] = None) -> ParsedReply:
        """
        Turns a raw FedEx XML reply into a ParsedRateReply or ParsedTrackReply.

        Raises ResponseContentError when the body is not a FedEx reply at all.
        A reply that parses but reports an error comes back with success=False.
        """
        if kind is not None and kind not in REPLY_ELEMENTS:
            raise ValueError(f"Unknown reply kind: {kind}")
        if not body or not body.strip():
            raise ResponseContentError("Empty response body", body)

        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise ResponseContentError(f"Invalid document: {e}", body) from e

        _strip_namespaces(root)
        reply_kind, reply = _locate_reply(root, kind, body)
        logger.debug(f"[FedEx] Parsing {reply.tag}")

        if reply_kind == RATE:
            return FedExResponseParser.parse_rate_reply(reply)
        return FedExResponseParser.parse_track_reply(reply)

    @staticmethod
    def notification(reply: ET.Element) -> tuple[bool, str]:
        node = reply.find("Notifications")
        if node is None:
            return False, ""
        severity = _text(node, "Severity") or ""
        code = _text(node, "Code") or ""
        message = _text(node, "Message") or ""
        return severity in SUCCESS_SEVERITIES, f"{severity} - {code}: {message}"

    @staticmethod
    def parse_rate_reply(reply: ET.Element) -> ParsedRateReply:
        success, message = FedExResponseParser.notification(reply)
        quotes = []

        for detail in reply.findall("RateReplyDetails"):
            service_code = _text(detail, "ServiceType") or ""
            service_type = service_code
            if _text(detail, "AppliedOptions") == "SATURDAY_DELIVERY":
                service_type = f"{service_code}_SATURDAY_DELIVERY"

            # First RatedShipmentDetails is the account rate
            shipment_rate = detail.find("RatedShipmentDetails")
            quotes.append(ParsedRateQuote(
                service_code=service_code,
                service_type=service_type,
                currency=_text(shipment_rate, "ShipmentRateDetail/TotalNetCharge/Currency") or "",
                total_amount=_decimal(_text(shipment_rate, "ShipmentRateDetail/TotalNetCharge/Amount")),
                delivery_timestamp=parse_timestamp(_text(detail, "DeliveryTimestamp"), utc=False),
                transit_time=_text(detail, "TransitTime"),
                maximum_transit_time=_text(detail, "MaximumTransitTime"),
                package_amounts=_package_amounts(shipment_rate),
            ))

        return ParsedRateReply(
            kind=RATE,
            success=success,
            message=message,
            params={reply.tag: _to_params(reply)},
            quotes=quotes,
        )

    @staticmethod
    def parse_track_reply(reply: ET.Element) -> ParsedTrackReply:
        success, message = FedExResponseParser.notification(reply)
        node = reply.find("TrackDetails")
        details = FedExResponseParser.parse_track_details(node) if node is not None else None

        return ParsedTrackReply(
            kind=TRACKING,
            success=success,
            message=message,
            params={reply.tag: _to_params(reply)},
            details=details,
        )

    @staticmethod
    def parse_track_details(node: ET.Element) -> ParsedTrackDetails:
        status_code = _text(node, "StatusCode") or ""
        delivered = status_code.upper() == "DL"

        signature = None
        if delivered and _text(node, "SignatureProofOfDeliveryAvailable") == "true":
            signature = _text(node, "DeliverySignatureName")

        events = [
            ParsedEventRecord(
                description=_text(event, "EventDescription") or "",
                timestamp=parse_timestamp(_text(event, "Timestamp")),
                type_code=_text(event, "EventType"),
                address=_address(event.find("Address")),
            )
            for event in node.findall("Events")
        ]

        return ParsedTrackDetails(
            tracking_number=_text(node, "TrackingNumber") or "",
            status_code=status_code,
            status_description=_text(node, "StatusDescription") or "",
            delivered=delivered,
            delivery_signature=signature,
            origin=_first_address(node, "OriginLocationAddress"),
            destination=_first_address(node, "DestinationAddress", "ActualDeliveryAddress"),
            shipper=_first_address(node, "ShipperAddress"),
            ship_time=parse_timestamp(_text(node, "ShipTimestamp")),
            estimated_delivery=parse_timestamp(_text(node, "EstimatedDeliveryTimestamp")),
            actual_delivery=parse_timestamp(_text(node, "ActualDeliveryTimestamp")),
            events=events,
        )
