from __future__ import annotations

from fastapi import FastAPI

from ..api import create_api_app
from ..config import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the full app. There is no frontend, so this is the API alone."""

    return create_api_app(settings=settings)


# Convenience for uvicorn: `uvicorn soulbounds.runtime.app:app`
app = create_app()
