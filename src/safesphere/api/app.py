"""
FastAPI application wiring.

`create_app()` builds the service (logging, CORS, router); the module-level `app`
is what `uvicorn safesphere.api.app:app` serves. Endpoint logic lives in
`safesphere.api.routes` and `safesphere.services`.
"""

from __future__ import annotations

import os
from typing import Any

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from safesphere.core.logging import configure_logging

from .routes import router

_LOCALHOST_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def cors_options() -> dict[str, Any] | None:
    """CORS middleware options from env, or None to leave CORS off.

    - SAFESPHERE_CORS_ORIGINS="http://localhost:8081,http://127.0.0.1:8081" (explicit list)
    - SAFESPHERE_CORS_ALLOW_LOCAL=0 disables the default any-localhost-port allowance,
      which mobile dev servers (Expo, Metro) rely on.
    """
    origins = [s.strip() for s in os.getenv("SAFESPHERE_CORS_ORIGINS", "").split(",") if s.strip()]
    allow_local = os.getenv("SAFESPHERE_CORS_ALLOW_LOCAL", "1").strip().lower() in {"1", "true", "yes", "y"}
    origin_regex = _LOCALHOST_ORIGIN_REGEX if allow_local and not origins else None
    if not origins and not origin_regex:
        return None
    return {
        "allow_origins": origins,
        "allow_origin_regex": origin_regex,
        "allow_credentials": False,
        "allow_methods": ["*"],
        "allow_headers": ["*"],
    }


def create_app() -> FastAPI:
    configure_logging()
    application = FastAPI(title="SafeSphere API", version="0.1.0")
    options = cors_options()
    if options:
        application.add_middleware(CORSMiddleware, **options)
    application.include_router(router)
    return application


app = create_app()
