"""FastAPI application serving the CityLens report form."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator

from fastapi import Body, FastAPI, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse, StreamingResponse

from citylens.analysis.image_description import (
    GenerateImageDescriptionInput,
    GenerateImageDescriptionOutput,
    generate_image_description,
)
from citylens.config import CityLensSettings
from citylens.errors import (
    ActionUnavailableError,
    DraftNotFoundError,
    EmptyAnalysisResultError,
    InvalidFileTypeError,
    ReportValidationError,
)
from citylens.logging_utils import get_logger
from citylens.notifications import Notification, NotificationBroker
from citylens.providers.base import VisionProvider
from citylens.providers.factory import LazyProvider
from citylens.report.controller import ReportFormController
from citylens.report.delivery import ReportSink, SimulatedReportSink
from citylens.report.geolocation import LocationProvider
from citylens.report.schemas import error_messages
from citylens.security import redact_sensitive_text
from ui.backend.models import (
    DraftResponse,
    FieldsUpdateRequest,
    LocationReportRequest,
    NotificationPayload,
)
from ui.backend.page import render_page
from ui.backend.store import DraftStore

LOGGER = get_logger("backend")


class BackendState:
    """Holds shared state for the API."""

    def __init__(
        self,
        settings: CityLensSettings,
        *,
        provider: VisionProvider | None = None,
        sink: ReportSink | None = None,
        location_provider: LocationProvider | None = None,
    ) -> None:
        self.settings = settings
        self.provider: VisionProvider = provider or LazyProvider(settings)
        self.sink = sink or SimulatedReportSink(delay_seconds=settings.submit_delay_seconds)
        self.location_provider = location_provider
        self.broker = NotificationBroker()
        self.drafts = DraftStore(
            self._create_controller,
            max_drafts=settings.max_drafts,
            on_evict=self.broker.discard,
        )

    def _create_controller(self, draft_id: str) -> ReportFormController:
        return ReportFormController(
            draft_id=draft_id,
            provider=self.provider,
            sink=self.sink,
            broker=self.broker,
            location_provider=self.location_provider,
            location_timeout_seconds=self.settings.geolocation_timeout_seconds,
        )

    def controller(self, draft_id: str) -> ReportFormController:
        try:
            return self.drafts.get(draft_id)
        except DraftNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Draft not found") from exc


def create_app(
    settings: CityLensSettings | None = None,
    *,
    provider: VisionProvider | None = None,
    sink: ReportSink | None = None,
    location_provider: LocationProvider | None = None,
) -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(title="CityLens API")
    state = BackendState(
        settings or CityLensSettings.from_env(),
        provider=provider,
        sink=sink,
        location_provider=location_provider,
    )
    app.state.citylens = state

    @app.get("/", response_class=HTMLResponse)
    def index() -> str:
        return render_page()

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "provider": state.settings.provider}

    @app.post("/api/describe", response_model=GenerateImageDescriptionOutput)
    def describe_image(payload: GenerateImageDescriptionInput) -> GenerateImageDescriptionOutput:
        try:
            return generate_image_description(payload, state.provider)
        except EmptyAnalysisResultError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            message = redact_sensitive_text(str(exc)) or "Unknown error during analysis."
            LOGGER.warning("Image description failed: %s", message)
            raise HTTPException(
                status_code=502, detail=f"Failed to analyze image: {message}"
            ) from exc

    @app.post("/api/drafts", response_model=DraftResponse)
    def create_draft() -> DraftResponse:
        controller = state.drafts.create()
        return DraftResponse.from_draft(controller.draft_id, controller.draft)

    @app.get("/api/drafts/{draft_id}", response_model=DraftResponse)
    def get_draft(draft_id: str) -> DraftResponse:
        controller = state.controller(draft_id)
        return DraftResponse.from_draft(draft_id, controller.draft)

    @app.delete("/api/drafts/{draft_id}")
    def delete_draft(draft_id: str) -> dict:
        try:
            state.drafts.delete(draft_id)
        except DraftNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Draft not found") from exc
        state.broker.discard(draft_id)
        return {"deleted": draft_id}

    @app.post("/api/drafts/{draft_id}/image", response_model=DraftResponse)
    async def select_image(draft_id: str, file: UploadFile = File(...)) -> DraftResponse:
        controller = state.controller(draft_id)
        content = await file.read()
        try:
            draft = await controller.select_image(
                name=file.filename or "upload",
                media_type=file.content_type or "",
                content=content,
            )
        except InvalidFileTypeError as exc:
            raise HTTPException(status_code=415, detail=str(exc)) from exc
        return DraftResponse.from_draft(draft_id, draft)

    @app.post("/api/drafts/{draft_id}/drop", response_model=DraftResponse)
    async def drop_image(draft_id: str, file: UploadFile = File(...)) -> DraftResponse:
        controller = state.controller(draft_id)
        content = await file.read()
        try:
            draft = await controller.drop_image(
                name=file.filename or "upload",
                media_type=file.content_type or "",
                content=content,
            )
        except InvalidFileTypeError as exc:
            raise HTTPException(status_code=415, detail=str(exc)) from exc
        return DraftResponse.from_draft(draft_id, draft)

    @app.post("/api/drafts/{draft_id}/analyze", response_model=DraftResponse)
    async def analyze_image(draft_id: str) -> DraftResponse:
        controller = state.controller(draft_id)
        try:
            draft = await controller.analyze()
        except ActionUnavailableError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return DraftResponse.from_draft(draft_id, draft)

    @app.patch("/api/drafts/{draft_id}/fields", response_model=DraftResponse)
    def update_fields(draft_id: str, payload: FieldsUpdateRequest) -> DraftResponse:
        controller = state.controller(draft_id)
        try:
            draft = controller.edit(payload.changes())
        except ActionUnavailableError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return DraftResponse.from_draft(draft_id, draft)

    @app.post("/api/drafts/{draft_id}/location", response_model=DraftResponse)
    async def report_location(draft_id: str, payload: LocationReportRequest) -> DraftResponse:
        controller = state.controller(draft_id)
        try:
            draft = await controller.locate(payload.to_provider())
        except ActionUnavailableError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return DraftResponse.from_draft(draft_id, draft)

    @app.post("/api/drafts/{draft_id}/submit", response_model=DraftResponse)
    async def submit_report(
        draft_id: str,
        payload: FieldsUpdateRequest | None = Body(default=None),
    ) -> DraftResponse:
        controller = state.controller(draft_id)
        try:
            draft = await controller.submit(payload.changes() if payload else None)
        except ActionUnavailableError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ReportValidationError as exc:
            raise HTTPException(
                status_code=422,
                detail={
                    "message": str(exc),
                    "field_errors": error_messages(exc.errors),
                    "draft": DraftResponse.from_draft(draft_id, controller.draft).model_dump(
                        mode="json"
                    ),
                },
            ) from exc
        return DraftResponse.from_draft(draft_id, draft)

    @app.post("/api/drafts/{draft_id}/reset", response_model=DraftResponse)
    def reset_draft(draft_id: str) -> DraftResponse:
        controller = state.controller(draft_id)
        try:
            draft = controller.reset()
        except ActionUnavailableError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return DraftResponse.from_draft(draft_id, draft)

    @app.get(
        "/api/drafts/{draft_id}/notifications",
        response_model=list[NotificationPayload],
    )
    def list_notifications(draft_id: str) -> list[NotificationPayload]:
        state.controller(draft_id)
        return [
            NotificationPayload.from_notification(item) for item in state.broker.history(draft_id)
        ]

    @app.get("/api/drafts/{draft_id}/notifications/sse")
    async def stream_notifications(draft_id: str) -> StreamingResponse:
        state.controller(draft_id)

        async def event_generator() -> AsyncGenerator[str, None]:
            queue = state.broker.subscribe(draft_id)
            try:
                while True:
                    notification = await queue.get()
                    yield _format_sse(notification)
            finally:
                state.broker.unsubscribe(draft_id, queue)

        return StreamingResponse(event_generator(), media_type="text/event-stream")

    return app


def _format_sse(notification: Notification) -> str:
    payload = NotificationPayload.from_notification(notification).model_dump(mode="json")
    return f"data: {json.dumps(payload)}\n\n"


app = create_app()
