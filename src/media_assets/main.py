"""ASGI entrypoint: ``uvicorn media_assets.main:app``."""

from media_assets.api.fastapi import create_app
from media_assets.app import get_settings, setup_logging

settings = get_settings()
setup_logging(settings)

app = create_app(settings)
