"""ASGI entrypoint for the medicine reminder API."""

from medicine_reminder.api.app import create_app
from medicine_reminder.containers import build_container

app = create_app(build_container())
