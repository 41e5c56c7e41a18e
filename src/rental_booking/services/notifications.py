"""WhatsApp notification dispatch with partial-failure aggregation."""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from rental_booking.adapters.wati_client import NOT_CONFIGURED_MESSAGE, MessagingClient
from rental_booking.app_logging import mask_phone
from rental_booking.domain.notifications import (
    DispatchSummary,
    NotificationOutcome,
    TemplateMessage,
    TemplateParameter,
)
from rental_booking.errors import ConfigurationError, NotificationError
from rental_booking.services.phone import format_phone_number

logger = logging.getLogger(__name__)

AFTER_BOOKING_TEMPLATE = "after_booking"
GUIDELINES_TEMPLATE = "guidelines_24_car"


def booking_confirmation_messages(booking_id: str) -> list[TemplateMessage]:
    """Templates sent after a booking is confirmed."""
    return [
        TemplateMessage(
            template_name=AFTER_BOOKING_TEMPLATE,
            parameters=[TemplateParameter(name="BookingID", value=booking_id)],
        ),
        TemplateMessage(template_name=GUIDELINES_TEMPLATE, parameters=[]),
    ]


def broadcast_name(booking_id: str) -> str:
    return f"booking_notification_{booking_id}"


@dataclass
class NotificationDispatcher:
    """Sends templated WhatsApp messages for a booking."""

    client: MessagingClient

    async def send(
        self,
        booking_id: str,
        phone_number: str,
        country_code: str,
        message: TemplateMessage,
    ) -> NotificationOutcome:
        """Send one template; every failure is reported as an outcome, not raised."""
        whatsapp_number = format_phone_number(phone_number, country_code)
        try:
            data = await self._deliver(booking_id, whatsapp_number, message)
        except ConfigurationError as exc:
            return NotificationOutcome(
                template_name=message.template_name,
                success=False,
                error=str(exc),
                status_code=500,
            )
        except NotificationError as exc:
            logger.error(
                "WhatsApp API error",
                extra={
                    "template": exc.template_name,
                    "status_code": exc.status_code,
                    "error": exc.detail,
                },
            )
            return NotificationOutcome(
                template_name=message.template_name,
                success=False,
                error=exc.detail,
                status_code=exc.status_code,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.exception(
                "Failed to send WhatsApp message",
                extra={"template": message.template_name, "booking_id": booking_id},
            )
            return NotificationOutcome(
                template_name=message.template_name,
                success=False,
                error=str(exc) or type(exc).__name__,
            )
        return NotificationOutcome(
            template_name=message.template_name,
            success=True,
            status_code=200,
            data=data,
        )

    async def send_all(
        self,
        booking_id: str,
        phone_number: str,
        country_code: str,
        messages: list[TemplateMessage],
    ) -> DispatchSummary:
        """Send every template concurrently and aggregate the outcomes."""
        if not self.client.is_configured:
            logger.error("WhatsApp service is not configured")
            return DispatchSummary(
                outcomes=[
                    NotificationOutcome(
                        template_name=message.template_name,
                        success=False,
                        error=NOT_CONFIGURED_MESSAGE,
                        status_code=500,
                    )
                    for message in messages
                ]
            )
        outcomes = await asyncio.gather(
            *(
                self.send(booking_id, phone_number, country_code, message)
                for message in messages
            )
        )
        summary = DispatchSummary(outcomes=list(outcomes))
        logger.info(
            "WhatsApp templates sent",
            extra={
                "booking_id": booking_id,
                "sent": summary.sent_count,
                "total": summary.total,
            },
        )
        return summary

    async def _deliver(
        self, booking_id: str, whatsapp_number: str, message: TemplateMessage
    ) -> dict[str, object]:
        parameters = message.parameters
        if parameters is None:
            parameters = [TemplateParameter(name="1", value=booking_id)]
        body: dict[str, object] = {
            "template_name": message.template_name,
            "broadcast_name": broadcast_name(booking_id),
            "parameters": [
                {"name": parameter.name, "value": parameter.value}
                for parameter in parameters
            ],
        }
        logger.info(
            "Sending WhatsApp template",
            extra={
                "template": message.template_name,
                "booking_id": booking_id,
                "phone_number": mask_phone(whatsapp_number),
                "parameters_count": len(parameters),
            },
        )
        response = await self.client.send_template(whatsapp_number, body)
        if not response.ok:
            raise NotificationError(
                template_name=message.template_name,
                detail=f"WhatsApp API returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response.payload()
