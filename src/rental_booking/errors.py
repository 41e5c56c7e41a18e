"""Error taxonomy for the booking lifecycle."""


class RentalBookingError(Exception):
    """Base class for domain errors."""


class ConfigurationError(RentalBookingError):
    """Required external configuration is missing."""


class ValidationError(RentalBookingError):
    """User input does not satisfy a booking precondition."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class StoreError(RentalBookingError):
    """A record store or object storage operation failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotificationError(RentalBookingError):
    """A single template send failed."""

    def __init__(
        self, template_name: str, detail: str, status_code: int | None = None
    ) -> None:
        super().__init__(detail)
        self.template_name = template_name
        self.detail = detail
        self.status_code = status_code


class MediaError(RentalBookingError):
    """A ride-completion file or submission was rejected."""

    def __init__(
        self, code: str, message: str, missing: tuple[str, ...] = ()
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.missing = missing
