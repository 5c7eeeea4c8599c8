import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from slack_notifier.config import Settings, get_settings
from slack_notifier.middleware import SecurityHeadersMiddleware
from slack_notifier.notifications.adapter import SlackNotifier
from slack_notifier.notifications.errors import (
    DeliveryRejectedError,
    ErrorKind,
    NotificationError,
)
from slack_notifier.notifications.registry import TriggerRegistry
from slack_notifier.notifications.renderer import MessageRenderer, build_environment
from slack_notifier.response import error_response
from slack_notifier.routers import notifications

API_VERSION = "0.1.0"

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.UNKNOWN_TRIGGER: 404,
    ErrorKind.MISSING_CONFIG: 500,
    ErrorKind.TEMPLATE_LOAD: 500,
    ErrorKind.TEMPLATE_RENDER: 500,
    ErrorKind.ENCODING: 500,
    ErrorKind.CONNECTION: 502,
    ErrorKind.TRANSPORT: 502,
    ErrorKind.RESPONSE_READ: 502,
    ErrorKind.DELIVERY_REJECTED: 502,
}


def build_notifier(settings: Settings) -> SlackNotifier:
    registry = TriggerRegistry.default()
    renderer = MessageRenderer(
        registry,
        build_environment(settings.slack_template_dir or None),
    )
    return SlackNotifier(settings.plugin_config(), registry=registry, renderer=renderer)


def create_app(
    settings: Optional[Settings] = None,
    notifier: Optional[SlackNotifier] = None,
) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Receive job lifecycle notifications and post them to a Slack room.",
        version=API_VERSION,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.notifier = notifier or build_notifier(settings)

    app.add_middleware(SecurityHeadersMiddleware)

    # --- Exception Handlers ---

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.status_code, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            clean = {k: v for k, v in err.items() if k != "ctx"}
            if "msg" in clean:
                clean["msg"] = str(clean["msg"])
            errors.append(clean)
        return JSONResponse(
            status_code=422,
            content=error_response(422, "Validation error", details=errors),
        )

    @app.exception_handler(NotificationError)
    async def notification_exception_handler(request: Request, exc: NotificationError):
        status = ERROR_STATUS.get(exc.kind, 500)
        logger.error("Notification failed [%s]: %s", exc.kind.value, exc.message)
        detail = exc.raw_response if isinstance(exc, DeliveryRejectedError) else None
        return JSONResponse(
            status_code=status,
            content=error_response(status, exc.message, kind=exc.kind.value, detail=detail),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response(500, "Internal server error"),
        )

    # --- Routes ---

    api_v1 = APIRouter(prefix="/v1")
    api_v1.include_router(notifications.router)
    app.include_router(api_v1)

    @app.get("/", summary="API root")
    async def root():
        return {"name": settings.app_name, "status": "ok", "version": API_VERSION}

    @app.get("/health", summary="Health check")
    async def health_ping():
        config = app.state.notifier.config
        checks = {
            "slack": "configured" if config.team_domain and config.auth_token else "unconfigured",
        }
        return {
            "status": "healthy" if checks["slack"] == "configured" else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": API_VERSION,
            "checks": checks,
        }

    return app
