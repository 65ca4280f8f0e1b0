from fastapi import APIRouter, Depends, HTTPException

from freight_engine.dependencies import get_fedex_service
from freight_engine.errors import ResponseContentError, TransportError
from freight_engine.schemas import RateQuery
from freight_engine.services.fedex import FedExService

router = APIRouter(prefix="/rates", tags=["Rates"])

@router.post("/fedex")
def quote_fedex(query: RateQuery, fedex: FedExService = Depends(get_fedex_service)):
    try:
        response = fedex.find_rates(
            query.origin,
            query.destination,
            query.packages,
            turn_around_time=query.turn_around_time,
        )
    except (ResponseContentError, TransportError) as e:
        raise HTTPException(status_code=502, detail=f"FedEx Gateway Failure: {e}")

    return {
        "success": response.success,
        "message": response.message,
        "rates": [rate.model_dump(mode="json") for rate in response.rates],
    }
