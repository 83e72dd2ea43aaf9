"""
HTTP surface for the slide repair engine.

Run locally with:
    python -m slide_repair.api.server
"""
import logging
import os
from datetime import datetime

import sentry_sdk
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

# Load env vars before any configuration is read
load_dotenv(override=True)

from slide_repair.api.middleware import RequestLoggingMiddleware
from slide_repair.api.requests.api_slide_repair import process_slide_batch_repair, process_slide_repair
from slide_repair.api.requests.api_slide_validate import process_slide_validate
from slide_repair.config import apply_logging_config, get_config
from slide_repair.exceptions import SlideRepairError
from slide_repair.models.requests import (
    SlideBatchRepairRequest,
    SlideBatchRepairResponse,
    SlideRepairRequest,
    SlideRepairResponse,
    SlideValidateRequest,
    SlideValidateResponse,
)
from slide_repair.repair.layouts import VARIANT_NAMES
from slide_repair.setup_logging_optimized import get_logger

logger = get_logger(__name__)


def init_sentry(dsn: str, environment: str) -> bool:
    """Initialize Sentry when a DSN is configured. Returns True when enabled."""
    if not dsn:
        return False

    sentry_logging = LoggingIntegration(
        level=logging.INFO,        # Capture info and above as breadcrumbs
        event_level=logging.ERROR  # Send errors as events
    )
    sentry_sdk.init(
        dsn=dsn,
        integrations=[
            FastApiIntegration(transaction_style='endpoint'),
            sentry_logging,
        ],
        traces_sample_rate=0.1,
        environment=environment,
        release=os.getenv("RENDER_GIT_COMMIT", "unknown"),
        send_default_pii=False,
        before_send=lambda event, hint: event if event.get('level') != 'debug' else None
    )
    return True


def create_app() -> FastAPI:
    config = get_config()
    logging_config = apply_logging_config()
    sentry_enabled = init_sentry(config.server.sentry_dsn, config.server.environment)

    app = FastAPI(title="Slide Repair API")

    app.add_middleware(RequestLoggingMiddleware, log_requests=logging_config.get("log_requests", True))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials="*" not in config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
        max_age=3600,
    )

    @app.exception_handler(SlideRepairError)
    async def slide_repair_error_handler(request: Request, exc: SlideRepairError):
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=422,
            content={
                "error": type(exc).__name__,
                "detail": exc.args[0] if exc.args else str(exc),
                "context": {k: str(v) for k, v in exc.context.items()},
            },
        )

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "environment": logging_config["environment"],
            "sentry": sentry_enabled,
            "layout_variants": list(VARIANT_NAMES),
        }

    @app.post("/api/slides/repair", response_model=SlideRepairResponse)
    async def api_slide_repair_endpoint(request: SlideRepairRequest):
        return await process_slide_repair(request)

    @app.post("/api/slides/repair-batch", response_model=SlideBatchRepairResponse)
    async def api_slide_batch_repair_endpoint(request: SlideBatchRepairRequest):
        return await process_slide_batch_repair(request)

    @app.post("/api/slides/validate", response_model=SlideValidateResponse)
    async def api_slide_validate_endpoint(request: SlideValidateRequest):
        return await process_slide_validate(request)

    return app


app = create_app()


if __name__ == "__main__":
    server_config = get_config().server
    logger.info(f"Server configured to run on {server_config.host}:{server_config.port}")
    uvicorn.run("slide_repair.api.server:app", host=server_config.host, port=server_config.port, workers=1)
