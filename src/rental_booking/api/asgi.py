"""ASGI entrypoint for the rental booking API."""

from rental_booking.api.app import create_app
from rental_booking.containers import build_container

app = create_app(build_container())
