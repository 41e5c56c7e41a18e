"""Tests for container wiring."""

import asyncio

from rental_booking.containers import build_container
from rental_booking.domain.lifecycle import Screen


def test_build_container_creates_services(settings) -> None:  # noqa: ANN001
    container = build_container(settings)

    assert container.messaging_client.is_configured
    assert container.reconciler.timeout_seconds == 2.0
    controller = container.new_lifecycle_controller()
    assert controller.state.screen == Screen.VERIFICATION
    assert controller.state.country_code == "1"
    assert controller.state.booking_id.startswith("BK-")
    asyncio.run(container.close_resources())
