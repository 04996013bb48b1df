from fastapi import APIRouter, Depends, HTTPException

from peniel.api.schemas import ContactRequest, ContactResponse
from peniel.application.contact import ContactService
from peniel.core.dependencies import get_contact_service
from peniel.core.observability import metrics
from peniel.domain.exceptions import EmailConfigurationException, EmailDeliveryException

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("", response_model=ContactResponse)
async def send_contact_message(
    request: ContactRequest,
    contact_service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    try:
        result = await contact_service.send(request)
    except EmailConfigurationException as e:
        metrics.record_http_request("POST", "/api/v1/contact", 503, 0.0)
        raise HTTPException(status_code=503, detail=str(e))
    except EmailDeliveryException as e:
        metrics.record_http_request("POST", "/api/v1/contact", 502, 0.0)
        raise HTTPException(status_code=502, detail=str(e))

    metrics.record_http_request("POST", "/api/v1/contact", 200, 0.0)
    return ContactResponse(id=result.get("id"))
