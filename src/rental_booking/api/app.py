"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from rental_booking.adapters.wati_client import NOT_CONFIGURED_MESSAGE
from rental_booking.api.models import WhatsAppRequest, WhatsAppResponse
from rental_booking.app_logging import configure_logging
from rental_booking.config import missing_messaging_settings
from rental_booking.containers import AppContainer
from rental_booking.domain.notifications import TemplateMessage, TemplateParameter

logger = logging.getLogger(__name__)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/whatsapp")
    async def send_whatsapp(
        payload: WhatsAppRequest, request: Request
    ) -> JSONResponse:
        """Send one booking template through the messaging provider."""
        state_container: AppContainer = request.app.state.container
        if not state_container.messaging_client.is_configured:
            logger.error(
                "Missing WhatsApp configuration",
                extra={"missing": missing_messaging_settings(state_container.settings)},
            )
            return _json_response(
                WhatsAppResponse(success=False, error=NOT_CONFIGURED_MESSAGE),
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        if not payload.booking_id or not payload.phone_number:
            return _json_response(
                WhatsAppResponse(
                    success=False,
                    error="Missing required fields: bookingId and phoneNumber",
                ),
                status.HTTP_400_BAD_REQUEST,
            )

        message = TemplateMessage(
            template_name=(
                payload.template_name or state_container.settings.wati_template_name
            ),
            parameters=(
                [
                    TemplateParameter(name=entry.name, value=entry.value)
                    for entry in payload.parameters
                ]
                if payload.parameters is not None
                else None
            ),
        )
        outcome = await state_container.notification_dispatcher.send(
            booking_id=payload.booking_id,
            phone_number=payload.phone_number,
            country_code=payload.country_code,
            message=message,
        )
        if not outcome.success:
            return _json_response(
                WhatsAppResponse(success=False, error=outcome.error),
                outcome.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return _json_response(
            WhatsAppResponse(
                success=True,
                message="Booking confirmation sent via WhatsApp",
                data=outcome.data,
            ),
            status.HTTP_200_OK,
        )

    return app


def _json_response(body: WhatsAppResponse, status_code: int) -> JSONResponse:
    return JSONResponse(
        content=body.model_dump(exclude_none=True), status_code=status_code
    )
