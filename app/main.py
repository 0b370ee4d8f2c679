"""
FastAPI application entry point.

Builds the process-wide relay state (page registry, translation cache,
channel adapters) once and exposes the webhook and catalog routes.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi_pagination import add_pagination
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.core.app_state import AppState
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers import labels_router, outbound, quick_replies_router, webhooks
from app.services.label_service import LabelService
from app.services.quick_reply_service import QuickReplyService
from app.utils.db.db_session_helper import db_session

logger = get_logger("main")


def seed_catalog() -> None:
    """Insert default labels and quick replies; a missing schema is logged, not fatal."""
    try:
        with db_session() as db:
            labels = LabelService(db).seed_defaults()
            quick_replies = QuickReplyService(db).seed_defaults()
    except SQLAlchemyError as e:
        logger.error("Could not seed catalog (run migrations first?): %s", e)
        return
    if labels or quick_replies:
        logger.info("Seeded %s labels and %s quick replies", labels, quick_replies)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    state: AppState = app.state.relay
    logger.info("Starting %s", settings.app_name)
    logger.info("Watching %s page(s)", len(state.pages))
    if state.telegram is None:
        logger.warning("Operator group is not configured; inbound messages will be rejected")
    if not app.state.testing:
        seed_catalog()
    yield
    logger.info("Shutting down %s", settings.app_name)
    await state.aclose()


def create_app(testing: bool = False) -> FastAPI:
    LoggingConfig()
    settings = get_settings()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.testing = testing
    app.state.relay = AppState.from_settings(settings)

    app.include_router(webhooks.router)
    app.include_router(outbound.router)
    app.include_router(labels_router.router)
    app.include_router(quick_replies_router.router)

    @app.get("/health", tags=["health"])
    def health(request: Request) -> dict[str, int | str]:
        return {"status": "ok", "pages": len(request.app.state.relay.pages)}

    add_pagination(app)
    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
