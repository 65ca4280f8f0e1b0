import logging
from abc import ABC, abstractmethod

import requests

from freight_engine.errors import TransportError
from freight_engine.schemas import FedExCredentials

logger = logging.getLogger(__name__)

TEST_URL = "https://gatewaybeta.fedex.com:443/xml"
LIVE_URL = "https://gateway.fedex.com:443/xml"


class Transport(ABC):
    """Delivers a serialized request to the carrier and returns the raw reply body."""

    @abstractmethod
    def send(self, request: str, credentials: FedExCredentials, test_mode: bool = False) -> str:
        ...


class RequestsTransport(Transport):
    """
    Posts to the FedEx XML gateway with module-level `requests.post`.

    No session is held, so one instance can be shared across threads. A
    session passed in explicitly is used instead.
    """

    def __init__(self, timeout: float = 30.0, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session

    def send(self, request: str, credentials: FedExCredentials, test_mode: bool = False) -> str:
        # FedEx XML carries the credentials inside the body
        url = TEST_URL if test_mode else LIVE_URL
        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(
                url,
                data=request.replace("\n", "").encode("utf-8"),
                headers={"Content-Type": "text/xml; charset=utf-8"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"[FedEx] Gateway unreachable: {e}")
            raise TransportError(f"FedEx gateway unreachable: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"[FedEx] Gateway error: {response.status_code}")
            raise TransportError(
                f"FedEx gateway returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response.text
