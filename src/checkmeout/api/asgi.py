"""ASGI entrypoint for the activity store API."""

from checkmeout.api.app import create_app
from checkmeout.containers import build_container

app = create_app(build_container())
