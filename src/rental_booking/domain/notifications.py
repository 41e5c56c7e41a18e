"""Domain models for notification dispatch."""

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True)
class TemplateParameter:
    """Single named template parameter."""

    name: str
    value: str


@dataclass(frozen=True)
class TemplateMessage:
    """A template to send, with optional parameters."""

    template_name: str
    parameters: list[TemplateParameter] | None = None


@dataclass(frozen=True)
class NotificationOutcome:
    """Result of one template send."""

    template_name: str
    success: bool
    error: str | None = None
    status_code: int | None = None
    data: dict[str, object] = field(default_factory=dict)


class DispatchStatus(StrEnum):
    """Aggregate result of a multi-template dispatch."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


class Severity(StrEnum):
    """Banner severity surfaced to the user."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_SEVERITY_BY_STATUS = {
    DispatchStatus.SUCCESS: Severity.SUCCESS,
    DispatchStatus.PARTIAL: Severity.WARNING,
    DispatchStatus.FAILURE: Severity.ERROR,
}


@dataclass(frozen=True)
class DispatchSummary:
    """Aggregated outcomes for a set of concurrently sent templates."""

    outcomes: list[NotificationOutcome]

    @property
    def sent_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def status(self) -> DispatchStatus:
        if self.total and self.sent_count == self.total:
            return DispatchStatus.SUCCESS
        if self.sent_count > 0:
            return DispatchStatus.PARTIAL
        return DispatchStatus.FAILURE

    @property
    def severity(self) -> Severity:
        return _SEVERITY_BY_STATUS[self.status]

    @property
    def message(self) -> str:
        if self.status == DispatchStatus.SUCCESS:
            return "Booking confirmed! All WhatsApp notifications sent successfully."
        if self.status == DispatchStatus.PARTIAL:
            return (
                f"Booking confirmed! {self.sent_count}/{self.total} WhatsApp "
                "notifications sent (could not send all notifications)."
            )
        return "Booking confirmed! (could not send any notification)"

    @property
    def errors(self) -> list[str]:
        return [
            f"{outcome.template_name}: {outcome.error}"
            for outcome in self.outcomes
            if not outcome.success and outcome.error
        ]


@dataclass(frozen=True)
class Banner:
    """Non-blocking status banner."""

    message: str
    severity: Severity
