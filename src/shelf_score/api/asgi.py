"""ASGI entrypoint for the ShelfScore API."""

from shelf_score.api.app import create_app
from shelf_score.containers import build_container

app = create_app(build_container())
