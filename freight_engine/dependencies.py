from functools import lru_cache

from fastapi import HTTPException

from freight_engine.errors import ConfigurationError
from freight_engine.services.fedex import FedExService


@lru_cache(maxsize=1)
def _fedex_service() -> FedExService:
    return FedExService.from_env()


def get_fedex_service() -> FedExService:
    """Shared FedExService built from the environment on first use."""
    try:
        return _fedex_service()
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e))
