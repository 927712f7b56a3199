from __future__ import annotations

import logging
import os
import sys
import time

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from reclaim_api import models  # noqa: F401
from reclaim_api.api import audit, auth, materials
from reclaim_api.core.auth import require_auth
from reclaim_api.core.config import settings
from reclaim_api.db.base import Base
from reclaim_api.db.session import SessionLocal, engine
from reclaim_api.services.seed import seed_demo_materials, seed_users

logger = logging.getLogger("reclaim_api.request")


def configure_app_logging() -> None:
    log_level_name = os.getenv("LOG_LEVEL", settings.log_level).upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    app_logger = logging.getLogger("reclaim_api")
    app_logger.setLevel(log_level)

    if not any(
        isinstance(handler, logging.StreamHandler) and handler.stream is sys.stdout
        for handler in app_logger.handlers
    ):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        app_logger.addHandler(stream_handler)

    app_logger.propagate = True


def init_database() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_users(db, settings)
        if settings.seed_demo_data:
            seed_demo_materials(db)
    finally:
        db.close()


def create_app() -> FastAPI:
    configure_app_logging()
    if settings.auth_enabled:
        settings.required_secret_key
    docs_url = "/docs" if settings.dev_mode else None
    openapi_url = "/openapi.json" if settings.dev_mode else None
    app = FastAPI(
        title="Reclaim Inventory API",
        version="0.1.0",
        docs_url=docs_url,
        openapi_url=openapi_url,
        redoc_url=None,
        swagger_ui_parameters={"persistAuthorization": True, "displayRequestDuration": True},
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(materials.router, dependencies=[Depends(require_auth)])
    app.include_router(audit.router, dependencies=[Depends(require_auth)])

    @app.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        started_at = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started_at) * 1000
            logger.info(
                "%s %s -> %s (%.2f ms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            return response
        except Exception:
            elapsed_ms = (time.perf_counter() - started_at) * 1000
            logger.exception(
                "%s %s -> 500 (%.2f ms)",
                request.method,
                request.url.path,
                elapsed_ms,
            )
            raise

    return app


app = create_app()


@app.on_event("startup")
def on_startup() -> None:
    init_database()


def run() -> None:
    import uvicorn

    uvicorn.run("reclaim_api.main:app", host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    run()
