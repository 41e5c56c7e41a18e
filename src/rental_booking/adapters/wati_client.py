"""WATI WhatsApp template API client."""

import json
from dataclasses import dataclass
from typing import Protocol

import httpx

from rental_booking.config import Settings
from rental_booking.errors import ConfigurationError

NOT_CONFIGURED_MESSAGE = (
    "WhatsApp service is not configured. Please check environment variables."
)


@dataclass(frozen=True)
class ProviderResponse:
    """Raw provider response."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def payload(self) -> dict[str, object]:
        """Parse the body as JSON, wrapping plain text as ``{"message": text}``."""
        try:
            parsed = json.loads(self.text)
        except ValueError:
            return {"message": self.text}
        if isinstance(parsed, dict):
            return parsed
        return {"message": parsed}


class MessagingClient(Protocol):
    """Interface for template message delivery."""

    @property
    def is_configured(self) -> bool:
        """Return True when endpoint, credential and channel are all set."""

    async def send_template(
        self, whatsapp_number: str, body: dict[str, object]
    ) -> ProviderResponse:
        """Send one template message and return the provider's response."""


@dataclass
class HttpxWatiClient(MessagingClient):
    """WATI client implemented with httpx."""

    api_url: str | None
    auth_token: str | None
    channel_number: str | None
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, settings: Settings) -> "HttpxWatiClient":
        """Create a WATI client with a managed httpx session."""
        return cls(
            api_url=settings.wati_api_url,
            auth_token=settings.wati_auth_token,
            channel_number=settings.wati_channel_number,
            http_client=httpx.AsyncClient(),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.auth_token and self.channel_number)

    async def send_template(
        self, whatsapp_number: str, body: dict[str, object]
    ) -> ProviderResponse:
        """POST a template message to WATI's sendTemplateMessage endpoint."""
        if not self.is_configured:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        payload = {**body, "channel_number": self.channel_number}
        response = await self.http_client.post(
            self.api_url,
            params={"whatsappNumber": whatsapp_number},
            headers={
                "accept": "*/*",
                "Authorization": f"Bearer {self.auth_token}",
                "Content-Type": "application/json-patch+json",
            },
            content=json.dumps(payload),
            timeout=15,
        )
        return ProviderResponse(status_code=response.status_code, text=response.text)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
