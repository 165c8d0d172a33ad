"""ASGI entrypoint for the wellness engine API."""

from wellness_engine.api.app import create_app
from wellness_engine.containers import build_container

app = create_app(build_container())
