"""ASGI entrypoint for the gallery API."""

from veo_gallery.api.app import create_app
from veo_gallery.containers import build_container

app = create_app(build_container())
