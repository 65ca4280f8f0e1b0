class FreightEngineError(Exception):
    """Base class for every error raised by the freight engine."""


class ConfigurationError(FreightEngineError):
    """Raised when a carrier client is built without its required settings."""


class TransportError(FreightEngineError):
    """Raised by a transport when the carrier could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseContentError(FreightEngineError):
    """
    Raised when a carrier reply is not a usable XML document.

    Distinct from a carrier-reported failure (bad address, no service),
    which comes back as an unsuccessful response instead of an exception.
    """

    def __init__(self, message: str, body: str | None = None):
        super().__init__(message)
        self.body = body
