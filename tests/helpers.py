import re
from datetime import timedelta, timezone
from pathlib import Path

from freight_engine.services.transport import Transport

FIXTURES = Path(__file__).parent / "fixtures"

EDT = timezone(timedelta(hours=-4))


class StubTransport(Transport):
    """Returns a canned body (or raises a canned error) and records every request."""

    def __init__(self, body):
        self.body = body
        self.requests = []

    def send(self, request, credentials, test_mode=False):
        self.requests.append({"request": request, "credentials": credentials, "test_mode": test_mode})
        if isinstance(self.body, Exception):
            raise self.body
        return self.body

    @property
    def last_request(self):
        return self.requests[-1]["request"]


def load_xml(name: str) -> str:
    return (FIXTURES / "fedex" / f"{name}.xml").read_text()


def remove_element(xml: str, tag: str) -> str:
    """Drops every <v?:Tag>...</v?:Tag> block from a fixture."""
    return re.sub(rf"\s*<(\w+:)?{tag}>.*?</(\w+:)?{tag}>", "", xml, flags=re.DOTALL)
