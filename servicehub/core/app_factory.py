from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer, build_container
from .logging import configure_logging
from ..presentation.api.errors import register_exception_handlers
from ..presentation.api.routers import admin as admin_router
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import payment as payment_router
from ..presentation.api.routers import profile as profile_router

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    container: Optional[ApplicationContainer] = None,
) -> FastAPI:
    """Build the FastAPI app; a prebuilt container is used as-is and left open on shutdown."""
    settings = settings or (container.settings if container else Settings())

    app = FastAPI(title="ServiceHub Identity", lifespan=_create_lifespan(settings, container))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(profile_router.router)
    app.include_router(admin_router.router)
    app.include_router(payment_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        current: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        return {
            "ok": True,
            "emailVerificationEnabled": current.account_service.verification_required,
        }

    return app


def _create_lifespan(settings: Settings, prebuilt: Optional[ApplicationContainer]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        container = prebuilt or build_container(settings)
        app.state.container = container  # type: ignore[attr-defined]
        logger.info(
            "Identity service ready (email verification %s)",
            "enabled" if container.account_service.verification_required else "disabled",
        )
        try:
            yield
        finally:
            if prebuilt is None:
                container.close()

    return lifespan
