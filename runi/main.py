from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from runi.core.config import settings
from runi.core.errors import AuthzError
from runi.core.logging_config import configure_logging
import runi.models  # noqa: F401  # force model registration

from runi.api.v1.permissions import router as permissions_router
from runi.api.v1.product_categories import router as product_categories_router
from runi.api.v1.staff import router as staff_router

logger = logging.getLogger(__name__)


async def authz_error_handler(request: Request, exc: AuthzError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()}, headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)

    from runi.crud.staff import purge_expired_sessions
    from runi.db.session import AsyncSessionLocal

    async with AsyncSessionLocal() as db:
        if settings.SEED_PERMISSIONS_ON_STARTUP:
            from runi.crud.permission import seed_permissions

            await seed_permissions(db)

        await purge_expired_sessions(db)

    logger.info("runi api started", extra={"environment": settings.ENVIRONMENT})
    yield


def create_application() -> FastAPI:
    app = FastAPI(title="Runi API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuthzError, authz_error_handler)

    @app.get("/")
    def root():
        return {"status": "ok", "service": "runi"}

    # Routers
    app.include_router(staff_router, prefix="/api/v1")
    app.include_router(permissions_router, prefix="/api/v1")
    app.include_router(product_categories_router, prefix="/api/v1")

    return app


app = create_application()
