"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pydantic
from fastapi import Body, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from meal_coach.api.models import AnalyzeMealRequest, CheckinRequest, LogMealRequest
from meal_coach.app_logging import configure_logging
from meal_coach.containers import AppContainer
from meal_coach.domain.errors import (
    AnalysisError,
    ConfigurationMissing,
    MealCoachError,
    ValidationError,
)
from meal_coach.domain.reminders import push_test_payload
from meal_coach.services.daily_log import ConsumptionUpdate

_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        if state_container.settings.scheduler_enabled:
            try:
                state_container.reminder_scheduler.start()
            except Exception:
                logger.exception("Failed to start reminder scheduler")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(MealCoachError)
    async def handle_domain_error(
        request: Request, exc: MealCoachError
    ) -> JSONResponse:
        if isinstance(exc, ValidationError):
            status_code = status.HTTP_400_BAD_REQUEST
        elif isinstance(exc, ConfigurationMissing):
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        elif isinstance(exc, AnalysisError):
            status_code = status.HTTP_502_BAD_GATEWAY
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return JSONResponse(status_code=status_code, content={"error": exc.code})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "invalid_request"},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal_error"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/status")
    async def get_status(
        request: Request,
        date: str | None = Query(default=None, pattern=_DATE_PATTERN),
    ) -> dict[str, object]:
        """Return today's (or a given date's) targets, consumption and check-ins."""
        state_container: AppContainer = request.app.state.container
        daily_logs = state_container.daily_log_service
        status_payload = await daily_logs.get_status(date or daily_logs.today())
        return {"ok": True, **status_payload}

    @app.get("/api/settings")
    async def get_settings(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return state_container.preferences.get_settings().to_document()

    @app.post("/api/settings")
    async def update_settings(
        request: Request, document: dict[str, object] | None = Body(default=None)
    ) -> dict[str, object]:
        """Replace the reminder settings document."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.preferences.set_settings(document or {})
        return {"ok": True, "settings": settings.to_document()}

    @app.get("/api/targets")
    async def get_targets(request: Request) -> dict[str, float]:
        state_container: AppContainer = request.app.state.container
        return state_container.preferences.get_targets()

    @app.post("/api/targets")
    async def update_targets(
        request: Request, document: dict[str, object] | None = Body(default=None)
    ) -> dict[str, object]:
        """Replace the daily targets document."""
        state_container: AppContainer = request.app.state.container
        targets = state_container.preferences.set_targets(document or {})
        return {"ok": True, "targets": targets}

    @app.post("/api/checkin")
    async def checkin(payload: CheckinRequest, request: Request) -> dict[str, object]:
        """Confirm a meal slot for today."""
        state_container: AppContainer = request.app.state.container
        daily_logs = state_container.daily_log_service
        log = await daily_logs.record_checkin(daily_logs.today(), payload.slot_id)
        return {"ok": True, "checkins": dict(log.checkins)}

    @app.post("/api/subscribe")
    async def subscribe(
        request: Request, info: dict[str, object] | None = Body(default=None)
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state_container.subscription_service.subscribe(info)
        return {"ok": True}

    @app.post("/api/unsubscribe")
    async def unsubscribe(
        request: Request, info: dict[str, object] | None = Body(default=None)
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state_container.subscription_service.unsubscribe(info)
        return {"ok": True}

    @app.get("/api/vapid-public-key")
    async def vapid_public_key(request: Request) -> dict[str, object]:
        """Expose the VAPID public key the browser needs to subscribe."""
        state_container: AppContainer = request.app.state.container
        if not state_container.settings.push_configured:
            raise ConfigurationMissing("push_not_configured")
        return {"ok": True, "publicKey": state_container.settings.vapid_public_key}

    @app.post("/api/push-test")
    async def push_test(request: Request) -> dict[str, object]:
        """Send a test notification to every subscription."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.notification_service.dispatch(
            push_test_payload()
        )
        return {
            "ok": True,
            "sent": result.sent,
            "failed": result.failed,
            "removed": result.removed,
        }

    @app.post("/api/nag-check")
    async def nag_check(request: Request) -> dict[str, object]:
        """Run one reminder tick on demand."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.nag_engine.tick()
        return {
            "ok": True,
            "status": result.status.value,
            "reminded": result.reminded,
        }

    @app.post("/api/log-meal")
    async def log_meal(payload: LogMealRequest, request: Request) -> dict[str, object]:
        """Add a manually entered meal to the day's consumption."""
        state_container: AppContainer = request.app.state.container
        update = await state_container.meal_log_service.log_meal(
            payload.summary, payload.items, date=payload.date
        )
        return {"ok": True, **_format_update(update)}

    @app.post("/api/analyze-meal")
    async def analyze_meal(request: Request) -> dict[str, object]:
        """Analyze a meal photo and add the estimate to today's log."""
        state_container: AppContainer = request.app.state.container
        if not state_container.settings.vision_configured:
            raise ConfigurationMissing("vision_not_configured")
        image_bytes, mime_type = await _read_image(request)
        analyzed = await state_container.meal_log_service.analyze_and_log(
            image_bytes, mime_type
        )
        return {
            "ok": True,
            "analysis": analyzed.analysis.model_dump(mode="json"),
            **_format_update(analyzed.update),
        }

    return app


def _format_update(update: ConsumptionUpdate) -> dict[str, object]:
    return {
        "consumed": update.consumed.to_dict(),
        "remaining": update.remaining,
    }


async def _read_image(request: Request) -> tuple[bytes, str | None]:
    """Extract image bytes from a multipart upload or a base64 JSON body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("image")
        if not isinstance(upload, UploadFile):
            raise ValidationError("image_required")
        data = await upload.read()
        if not data:
            raise ValidationError("image_required")
        return data, upload.content_type

    try:
        payload = AnalyzeMealRequest.model_validate(await request.json())
    except (ValueError, pydantic.ValidationError) as exc:
        raise ValidationError("image_required") from exc
    raw = payload.image_base64 or ""
    encoded = raw.split(",")[-1] if "," in raw else raw
    if not encoded:
        raise ValidationError("image_required")
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("invalid_image") from exc
    return data, payload.mime_type or "image/jpeg"
