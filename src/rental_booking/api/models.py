"""Pydantic models for the notification route."""

from pydantic import BaseModel, ConfigDict, Field


class TemplateParameterPayload(BaseModel):
    """Named template parameter."""

    name: str
    value: str


class WhatsAppRequest(BaseModel):
    """Body of a booking notification request."""

    model_config = ConfigDict(populate_by_name=True)

    booking_id: str | None = Field(default=None, alias="bookingId")
    phone_number: str | None = Field(default=None, alias="phoneNumber")
    country_code: str = Field(default="91", alias="countryCode")
    template_name: str | None = Field(default=None, alias="templateName")
    parameters: list[TemplateParameterPayload] | None = None


class WhatsAppResponse(BaseModel):
    """Result of a booking notification request."""

    success: bool
    message: str | None = None
    error: str | None = None
    data: dict[str, object] | None = None
