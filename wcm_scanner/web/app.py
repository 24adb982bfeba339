"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from wcm_scanner import __version__
from wcm_scanner.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="wcm-scanner", version=__version__)
    app.include_router(router)
    return app
