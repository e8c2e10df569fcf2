import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_use_cases
from app.api.schemas.webhooks import WebhookAckResponse
from app.application.dtos.webhook_dto import WebhookDelivery
from app.domain.errors import WebhookIngressError

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "Paymongo-Signature"


def client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None


@router.post(
    "/webhooks/paymongo",
    response_model=WebhookAckResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def paymongo_webhook(
    request: Request,
    use_cases=Depends(get_use_cases),
):
    raw_body = await request.body()
    delivery = WebhookDelivery(
        raw_body=raw_body,
        signature=request.headers.get(SIGNATURE_HEADER),
        headers=dict(request.headers),
        ip_address=client_ip(request),
    )
    try:
        ack = await use_cases["handle_webhook"].execute(delivery)
    except WebhookIngressError as exc:
        logger.warning(
            "Webhook rejected",
            extra={"reason": exc.code, "ip_address": delivery.ip_address},
        )
        return JSONResponse(
            status_code=exc.http_status,
            content={"received": False, "error": exc.message},
        )
    return WebhookAckResponse(received=ack.received, processed=ack.processed, error=ack.error)
