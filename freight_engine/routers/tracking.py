from fastapi import APIRouter, Depends, HTTPException

from freight_engine.dependencies import get_fedex_service
from freight_engine.errors import ResponseContentError, TransportError
from freight_engine.services.fedex import FedExService

router = APIRouter()

@router.get("/track/fedex/{tracking_number}")
def get_fedex(tracking_number: str, fedex: FedExService = Depends(get_fedex_service)):
    try:
        response = fedex.find_tracking_info(tracking_number)
    except (ResponseContentError, TransportError) as e:
        raise HTTPException(status_code=502, detail=f"FedEx Gateway Failure: {e}")

    # Carrier-side failures (unknown number etc.) still come back as 200
    return {
        "success": response.success,
        "message": response.message,
        "delivered": response.delivered,
        "tracking": response.record.model_dump(mode="json") if response.record else None,
    }
