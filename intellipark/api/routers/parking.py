import logging
import secrets

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from intellipark.api.dependencies import get_use_cases
from intellipark.api.schemas.parking import (
    BookingResponse,
    CreateInvoiceRequest,
    CreateInvoiceResponse,
    ErrorResponse,
    ExitRequest,
    ExitResponse,
    VerifyExitRequest,
    VerifyExitResponse,
    XenditWebhookEvent,
)
from intellipark.config import Settings, get_settings
from intellipark.domain.errors import DomainError, WebhookAuthenticationError

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post(
    "/create-invoice",
    response_model=CreateInvoiceResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
)
async def create_invoice(
    payload: CreateInvoiceRequest,
    use_cases=Depends(get_use_cases),
):
    logger.info(
        "Booking request received",
        extra={"slot": payload.slot, "type": payload.type, "vehicle": payload.vehicle},
    )
    try:
        return await use_cases["create_invoice"].execute(payload)
    except DomainError:
        raise
    except Exception as exc:
        logger.error("Error creating invoice", exc_info=exc, extra={"slot": payload.slot})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to create invoice", "details": str(exc)},
        )


@router.post("/xendit-webhook")
async def xendit_webhook(
    request: Request,
    use_cases=Depends(get_use_cases),
    settings: Settings = Depends(get_settings),
) -> Response:
    if settings.xendit_callback_token:
        token = request.headers.get("x-callback-token") or ""
        if not secrets.compare_digest(token.encode(), settings.xendit_callback_token.encode()):
            logger.warning("Webhook refused: invalid callback token")
            raise WebhookAuthenticationError()

    try:
        event = XenditWebhookEvent.model_validate(await request.json())
    except (ValueError, PydanticValidationError):
        logger.warning("Webhook refused: unreadable body")
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        await use_cases["handle_webhook"].execute(event)
    except Exception as exc:
        logger.error("Webhook error", exc_info=exc, extra={"external_id": event.external_id})
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/exit",
    response_model=ExitResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
)
async def exit_slot(
    payload: ExitRequest,
    use_cases=Depends(get_use_cases),
) -> ExitResponse:
    return await use_cases["exit_slot"].execute(payload)


@router.post(
    "/verify-exit",
    response_model=VerifyExitResponse,
    status_code=status.HTTP_200_OK,
)
async def verify_exit(
    payload: VerifyExitRequest,
    use_cases=Depends(get_use_cases),
) -> VerifyExitResponse:
    return await use_cases["verify_exit"].execute(payload.plate)


@router.get(
    "/booking/{external_id}",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
async def get_booking(
    external_id: str,
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    return await use_cases["lookup_booking"].execute(external_id)
