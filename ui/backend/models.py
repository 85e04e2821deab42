"""Pydantic models for the CityLens HTTP backend."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from citylens.errors import GeolocationErrorCode
from citylens.notifications import Notification, NotificationVariant
from citylens.report.draft import ReportDraft, ReportPhase
from citylens.report.geolocation import Coordinates, ReportedLocationProvider
from citylens.report.schemas import FieldErrorReason


class ReportFieldsModel(BaseModel):
    """Current values of the report form."""

    description: str
    location: str
    email: str
    comments: str
    send_to_local_police: bool
    send_to_city_hall: bool


class FieldsUpdateRequest(BaseModel):
    """Partial update of the report form; omitted fields stay unchanged."""

    description: str | None = None
    location: str | None = None
    email: str | None = None
    comments: str | None = None
    send_to_local_police: bool | None = None
    send_to_city_hall: bool | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class LocationReportRequest(BaseModel):
    """Outcome of the browser's geolocation request."""

    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    error: GeolocationErrorCode | None = None

    @model_validator(mode="after")
    def _check_outcome(self) -> LocationReportRequest:
        has_position = self.latitude is not None and self.longitude is not None
        if has_position == (self.error is not None):
            raise ValueError("Provide either latitude and longitude, or an error code.")
        return self

    def to_provider(self) -> ReportedLocationProvider:
        if self.error is not None:
            return ReportedLocationProvider(error_code=self.error)
        if self.latitude is None or self.longitude is None:
            raise ValueError("latitude and longitude are required.")
        return ReportedLocationProvider(
            coordinates=Coordinates(latitude=self.latitude, longitude=self.longitude)
        )


class FieldErrorModel(BaseModel):
    """One field-scoped validation error."""

    reason: FieldErrorReason
    message: str


class DraftResponse(BaseModel):
    """Serialized report draft."""

    draft_id: str
    generation: int
    phase: ReportPhase
    image_name: str | None
    image_media_type: str | None
    image_size: int | None
    image_preview: str | None
    values: ReportFieldsModel
    field_errors: dict[str, FieldErrorModel]
    analyzing: bool
    analysis_error: str | None
    locating: bool
    location_error: str | None
    submitting: bool
    submit_succeeded: bool
    submission_error: str | None
    can_analyze: bool
    can_submit: bool

    @classmethod
    def from_draft(cls, draft_id: str, draft: ReportDraft) -> DraftResponse:
        image = draft.image
        return cls(
            draft_id=draft_id,
            generation=draft.generation,
            phase=draft.phase,
            image_name=image.name if image else None,
            image_media_type=image.media_type if image else None,
            image_size=image.size if image else None,
            image_preview=draft.image_data_uri,
            values=ReportFieldsModel(**draft.values.to_dict()),
            field_errors={
                name: FieldErrorModel(reason=reason, message=reason.message)
                for name, reason in draft.field_errors.items()
            },
            analyzing=draft.analyzing,
            analysis_error=draft.analysis_error,
            locating=draft.locating,
            location_error=draft.location_error,
            submitting=draft.submitting,
            submit_succeeded=draft.submit_succeeded,
            submission_error=draft.submission_error,
            can_analyze=draft.can_analyze,
            can_submit=draft.can_submit,
        )


class NotificationPayload(BaseModel):
    """Notification payload for SSE and history endpoints."""

    notification_id: str
    draft_id: str
    title: str
    description: str
    variant: NotificationVariant
    timestamp: datetime

    @classmethod
    def from_notification(cls, notification: Notification) -> NotificationPayload:
        return cls(
            notification_id=notification.notification_id,
            draft_id=notification.draft_id,
            title=notification.title,
            description=notification.description,
            variant=notification.variant,
            timestamp=notification.timestamp,
        )
