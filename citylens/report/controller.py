"""Report form controller: file intake, AI analysis, location lookup and submission."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from citylens.analysis.image_description import (
    GenerateImageDescriptionInput,
    generate_image_description,
)
from citylens.config import GEOLOCATION_TIMEOUT_SECONDS
from citylens.errors import (
    ActionUnavailableError,
    GeolocationError,
    GeolocationErrorCode,
    InvalidFileTypeError,
    ReportValidationError,
)
from citylens.logging_utils import get_logger
from citylens.notifications import Notification, NotificationBroker, NotificationVariant
from citylens.providers.base import VisionProvider
from citylens.report.data_uri import encode_data_uri, is_image_media_type
from citylens.report.delivery import ReportSink, SubmittedReport
from citylens.report.draft import (
    AnalysisFailed,
    AnalysisStarted,
    AnalysisSucceeded,
    DraftAction,
    FieldsEdited,
    ImageFile,
    ImageSelected,
    LocationFailed,
    LocationLookupStarted,
    LocationResolved,
    PreviewRendered,
    ReportDraft,
    Reset,
    SubmissionFailed,
    SubmissionStarted,
    SubmissionSucceeded,
    ValidationFailed,
    is_stale,
    reduce_draft,
)
from citylens.report.geolocation import (
    LocationProvider,
    UnsupportedLocationProvider,
    geolocation_message,
    lookup_location,
)
from citylens.report.schemas import validate_report_form
from citylens.security import redact_sensitive_text

LOGGER = get_logger("controller")


class ReportFormController:
    """Owns one report draft and runs every user action against it.

    Analyze, locate and submit are single in-flight: invoking one while the
    previous call of the same action is still pending raises
    :class:`ActionUnavailableError`. Switching images is always allowed; a
    completion that arrives for an older image is dropped.
    """

    def __init__(
        self,
        *,
        draft_id: str,
        provider: VisionProvider,
        sink: ReportSink,
        broker: NotificationBroker | None = None,
        location_provider: LocationProvider | None = None,
        location_timeout_seconds: float = GEOLOCATION_TIMEOUT_SECONDS,
    ) -> None:
        self.draft_id = draft_id
        self._provider = provider
        self._sink = sink
        self._broker = broker or NotificationBroker()
        self._location_provider: LocationProvider = (
            location_provider or UnsupportedLocationProvider()
        )
        self._location_timeout_seconds = location_timeout_seconds
        self._draft = ReportDraft()

    @property
    def draft(self) -> ReportDraft:
        return self._draft

    @property
    def notifications(self) -> list[Notification]:
        return self._broker.history(self.draft_id)

    def dispatch(self, action: DraftAction) -> bool:
        """Fold an action into the draft; return False when it was stale."""
        if is_stale(self._draft, action):
            LOGGER.debug(
                "Discarding stale %s for draft %s (generation %s != %s).",
                type(action).__name__,
                self.draft_id,
                getattr(action, "generation", None),
                self._draft.generation,
            )
            return False
        self._draft = reduce_draft(self._draft, action)
        return True

    # -- file intake -----------------------------------------------------

    async def select_image(self, *, name: str, media_type: str, content: bytes) -> ReportDraft:
        """Accept an image picked through the file browser."""
        return await self._intake(
            name=name, media_type=media_type, content=content, source="browse"
        )

    async def drop_image(self, *, name: str, media_type: str, content: bytes) -> ReportDraft:
        """Accept an image dropped onto the form; non-images are rejected."""
        return await self._intake(
            name=name, media_type=media_type, content=content, source="drop"
        )

    async def _intake(
        self, *, name: str, media_type: str, content: bytes, source: str
    ) -> ReportDraft:
        if not is_image_media_type(media_type):
            LOGGER.info("Rejected %s %s of type %r.", source, name, media_type)
            self._notify(
                "Invalid File Type",
                "Please upload an image file.",
                variant=NotificationVariant.destructive,
            )
            raise InvalidFileTypeError(media_type)
        self.dispatch(ImageSelected(ImageFile(name=name, media_type=media_type, content=content)))
        generation = self._draft.generation
        LOGGER.info("Draft %s selected image %s (%d bytes).", self.draft_id, name, len(content))
        preview = await asyncio.to_thread(encode_data_uri, content, media_type)
        self.dispatch(PreviewRendered(generation=generation, data_uri=preview))
        return self._draft

    # -- analysis ----------------------------------------------------------

    async def analyze(self) -> ReportDraft:
        """Describe the current image with the vision provider."""
        draft = self._draft
        if draft.image is None:
            raise ActionUnavailableError("Select an image before analyzing.")
        if not draft.can_analyze:
            raise ActionUnavailableError("Image analysis is not available right now.")
        image = draft.image
        generation = draft.generation
        self.dispatch(AnalysisStarted(generation=generation))
        try:
            photo_data_uri = await asyncio.to_thread(
                encode_data_uri, image.content, image.media_type
            )
            result = await asyncio.to_thread(
                generate_image_description,
                GenerateImageDescriptionInput(photo_data_uri=photo_data_uri),
                self._provider,
            )
        except Exception as exc:  # noqa: BLE001
            message = redact_sensitive_text(str(exc)) or "Unknown error during analysis."
            LOGGER.warning("Error analyzing image for draft %s: %s", self.draft_id, message)
            if self.dispatch(
                AnalysisFailed(generation=generation, message=f"Failed to analyze image: {message}")
            ):
                self._notify(
                    "Analysis Failed", message, variant=NotificationVariant.destructive
                )
            return self._draft
        if self.dispatch(AnalysisSucceeded(generation=generation, description=result.description)):
            self._notify("Analysis Complete", "Image description generated.")
        return self._draft

    # -- form fields ---------------------------------------------------------

    def edit(self, changes: Mapping[str, Any]) -> ReportDraft:
        """Apply user edits to the form fields."""
        if not self._draft.can_edit:
            raise ActionUnavailableError("The report form cannot be edited right now.")
        self.dispatch(FieldsEdited(changes=dict(changes)))
        return self._draft

    async def locate(self, provider: LocationProvider | None = None) -> ReportDraft:
        """Fill the location field from the current position."""
        if not self._draft.can_edit:
            raise ActionUnavailableError("The report form cannot be edited right now.")
        if self._draft.locating:
            raise ActionUnavailableError("A location lookup is already in progress.")
        source = provider or self._location_provider
        generation = self._draft.generation
        self.dispatch(LocationLookupStarted(generation=generation))
        try:
            coordinates = await lookup_location(
                source, timeout_seconds=self._location_timeout_seconds
            )
        except GeolocationError as exc:
            message = geolocation_message(exc.code)
            LOGGER.info("Location lookup failed for draft %s: %s", self.draft_id, exc.code.value)
            if self.dispatch(LocationFailed(generation=generation, message=message)):
                title = (
                    "Geolocation Not Supported"
                    if exc.code is GeolocationErrorCode.unsupported
                    else "Location Error"
                )
                self._notify(title, message, variant=NotificationVariant.destructive)
            return self._draft
        location = coordinates.format()
        if self.dispatch(LocationResolved(generation=generation, location=location)):
            self._notify("Location Fetched", f"Coordinates: {location}")
        return self._draft

    # -- submission ------------------------------------------------------------

    async def submit(self, changes: Mapping[str, Any] | None = None) -> ReportDraft:
        """Validate the draft and hand it to the report sink."""
        if changes:
            self.edit(changes)
        draft = self._draft
        if not draft.can_submit:
            raise ActionUnavailableError("The report cannot be submitted right now.")
        errors = validate_report_form(draft.values)
        if errors:
            self.dispatch(ValidationFailed(errors=errors))
            raise ReportValidationError(errors)
        generation = draft.generation
        self.dispatch(SubmissionStarted(generation=generation))
        report = SubmittedReport(
            image_name=draft.image.name if draft.image else None,
            values=draft.values,
        )
        try:
            await self._sink.deliver(report)
        except Exception as exc:  # noqa: BLE001
            message = redact_sensitive_text(str(exc)) or "Unknown error during submission."
            LOGGER.warning("Report delivery failed for draft %s: %s", self.draft_id, message)
            if self.dispatch(SubmissionFailed(generation=generation, message=message)):
                self._notify(
                    "Submission Failed", message, variant=NotificationVariant.destructive
                )
            return self._draft
        if self.dispatch(SubmissionSucceeded(generation=generation)):
            LOGGER.info("Report %s submitted for draft %s.", report.report_id, self.draft_id)
            self._notify(
                "Report Submitted!", "Your urban issue report has been notionally sent."
            )
        return self._draft

    def reset(self) -> ReportDraft:
        """Start over after a successful submission."""
        if not self._draft.submit_succeeded:
            raise ActionUnavailableError("Only a submitted report can be reset.")
        self.dispatch(Reset())
        return self._draft

    def _notify(
        self,
        title: str,
        description: str,
        *,
        variant: NotificationVariant = NotificationVariant.default,
    ) -> None:
        self._broker.publish(
            Notification.create(
                draft_id=self.draft_id,
                title=title,
                description=description,
                variant=variant,
            )
        )
