"""ASGI entrypoint for the meme app."""

from catemoji.api.app import create_app
from catemoji.containers import build_container

app = create_app(build_container())
