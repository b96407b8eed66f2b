"""ASGI entrypoint for the photogram API."""

from photogram.api.app import create_app
from photogram.containers import build_container

app = create_app(build_container())
