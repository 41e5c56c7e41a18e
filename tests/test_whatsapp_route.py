"""Tests for the WhatsApp notification route."""

from fastapi.testclient import TestClient

from rental_booking.api.app import create_app


def _post(container, payload: dict[str, object]):  # type: ignore[no-untyped-def]
    client = TestClient(create_app(container))
    return client.post("/api/whatsapp", json=payload)


def test_health(container) -> None:  # noqa: ANN001
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unconfigured_provider_returns_500(container, messaging_client) -> None:  # noqa: ANN001
    messaging_client.configured = False

    response = _post(container, {"bookingId": "BK-1", "phoneNumber": "9876543210"})

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": (
            "WhatsApp service is not configured. Please check environment variables."
        ),
    }
    assert messaging_client.sent == []


def test_missing_fields_return_400(container, messaging_client) -> None:  # noqa: ANN001
    response = _post(container, {"bookingId": "BK-1"})

    assert response.status_code == 400
    assert response.json()["error"] == (
        "Missing required fields: bookingId and phoneNumber"
    )
    assert messaging_client.sent == []


def test_sends_default_template(container, messaging_client) -> None:  # noqa: ANN001
    response = _post(container, {"bookingId": "BK-1", "phoneNumber": "98765 43210"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Booking confirmation sent via WhatsApp",
        "data": {"result": True},
    }
    number, body = messaging_client.sent[0]
    assert number == "919876543210"
    assert body["template_name"] == "bookingconfirmation"
    assert body["parameters"] == [{"name": "1", "value": "BK-1"}]


def test_explicit_template_and_parameters(container, messaging_client) -> None:  # noqa: ANN001
    response = _post(
        container,
        {
            "bookingId": "BK-1",
            "phoneNumber": "4155550134",
            "countryCode": "1",
            "templateName": "after_booking",
            "parameters": [{"name": "BookingID", "value": "BK-1"}],
        },
    )

    assert response.status_code == 200
    number, body = messaging_client.sent[0]
    assert number == "14155550134"
    assert body["template_name"] == "after_booking"
    assert body["parameters"] == [{"name": "BookingID", "value": "BK-1"}]


def test_provider_error_status_is_passed_through(
    container, messaging_client  # noqa: ANN001
) -> None:
    messaging_client.failing_templates.add("bookingconfirmation")

    response = _post(container, {"bookingId": "BK-1", "phoneNumber": "9876543210"})

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "WhatsApp API returned 400: template not approved",
    }
