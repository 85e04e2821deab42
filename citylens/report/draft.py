"""Report draft state and the pure reducer that drives every transition.

The controller never mutates a draft in place. Each user action or
asynchronous completion is expressed as an action value and folded into
the current draft with :func:`reduce_draft`. Completions carry the
``generation`` that was current when their operation started; the reducer
drops them when the user has since picked a new image or reset the form.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from citylens.report.schemas import (
    CITY_HALL_FIELD,
    COMMENTS_FIELD,
    DESCRIPTION_FIELD,
    EMAIL_FIELD,
    LOCAL_POLICE_FIELD,
    LOCATION_FIELD,
    FieldErrorReason,
    ReportFormValues,
    validate_field,
)

EDITABLE_FIELDS = frozenset(
    {
        DESCRIPTION_FIELD,
        LOCATION_FIELD,
        EMAIL_FIELD,
        COMMENTS_FIELD,
        LOCAL_POLICE_FIELD,
        CITY_HALL_FIELD,
    }
)
_BOOLEAN_FIELDS = frozenset({LOCAL_POLICE_FIELD, CITY_HALL_FIELD})


class ReportPhase(str, Enum):
    """Coarse lifecycle phase of a draft."""

    empty = "empty"
    image_selected = "image_selected"
    analyzing = "analyzing"
    analysis_ready = "analysis_ready"
    analysis_failed = "analysis_failed"
    report_form_visible = "report_form_visible"
    submitting = "submitting"
    submit_succeeded = "submit_succeeded"


@dataclass(frozen=True)
class ImageFile:
    """Raw image selected by the user."""

    name: str
    media_type: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ReportDraft:
    """Complete, immutable view of one in-progress report."""

    generation: int = 0
    phase: ReportPhase = ReportPhase.empty
    image: ImageFile | None = None
    image_data_uri: str | None = field(default=None, repr=False)
    values: ReportFormValues = field(default_factory=ReportFormValues)
    field_errors: Mapping[str, FieldErrorReason] = field(default_factory=dict)
    analyzing: bool = False
    analysis_error: str | None = None
    locating: bool = False
    location_error: str | None = None
    submitting: bool = False
    submit_succeeded: bool = False
    submission_error: str | None = None

    @property
    def description(self) -> str:
        return self.values.description

    @property
    def can_analyze(self) -> bool:
        return (
            self.image is not None
            and not self.analyzing
            and not self.values.description
            and not self.submit_succeeded
        )

    @property
    def can_submit(self) -> bool:
        return (
            bool(self.values.description)
            and not self.analyzing
            and not self.submitting
            and not self.submit_succeeded
        )

    @property
    def can_edit(self) -> bool:
        return (
            self.image is not None
            and not self.analyzing
            and not self.submitting
            and not self.submit_succeeded
        )


# ---------------------------------------------------------------------------
# Actions


@dataclass(frozen=True)
class ImageSelected:
    image: ImageFile


@dataclass(frozen=True)
class PreviewRendered:
    generation: int
    data_uri: str


@dataclass(frozen=True)
class AnalysisStarted:
    generation: int


@dataclass(frozen=True)
class AnalysisSucceeded:
    generation: int
    description: str


@dataclass(frozen=True)
class AnalysisFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class FieldsEdited:
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class LocationLookupStarted:
    generation: int


@dataclass(frozen=True)
class LocationResolved:
    generation: int
    location: str


@dataclass(frozen=True)
class LocationFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class ValidationFailed:
    errors: Mapping[str, FieldErrorReason]


@dataclass(frozen=True)
class SubmissionStarted:
    generation: int


@dataclass(frozen=True)
class SubmissionSucceeded:
    generation: int


@dataclass(frozen=True)
class SubmissionFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class Reset:
    pass


DraftAction = (
    ImageSelected
    | PreviewRendered
    | AnalysisStarted
    | AnalysisSucceeded
    | AnalysisFailed
    | FieldsEdited
    | LocationLookupStarted
    | LocationResolved
    | LocationFailed
    | ValidationFailed
    | SubmissionStarted
    | SubmissionSucceeded
    | SubmissionFailed
    | Reset
)


def is_stale(draft: ReportDraft, action: DraftAction) -> bool:
    """Return whether an action belongs to a superseded generation.

    Analysis completions are also stale once no analysis is pending or the
    report has already been submitted.
    """
    generation = getattr(action, "generation", None)
    if generation is not None and generation != draft.generation:
        return True
    if isinstance(action, (AnalysisSucceeded, AnalysisFailed)):
        return not draft.analyzing or draft.submit_succeeded
    return False


def reduce_draft(draft: ReportDraft, action: DraftAction) -> ReportDraft:
    """Apply an action and return the next draft."""
    if is_stale(draft, action):
        return draft

    if isinstance(action, ImageSelected):
        return ReportDraft(
            generation=draft.generation + 1,
            phase=ReportPhase.image_selected,
            image=action.image,
        )
    if isinstance(action, Reset):
        return ReportDraft(generation=draft.generation + 1)
    if isinstance(action, PreviewRendered):
        return replace(draft, image_data_uri=action.data_uri)

    if isinstance(action, AnalysisStarted):
        return replace(
            draft,
            phase=ReportPhase.analyzing,
            analyzing=True,
            analysis_error=None,
            values=replace(draft.values, description=""),
        )
    if isinstance(action, AnalysisSucceeded):
        return replace(
            draft,
            phase=ReportPhase.analysis_ready,
            analyzing=False,
            analysis_error=None,
            values=replace(draft.values, description=action.description),
        )
    if isinstance(action, AnalysisFailed):
        return replace(
            draft,
            phase=ReportPhase.analysis_failed,
            analyzing=False,
            analysis_error=action.message,
        )

    if isinstance(action, FieldsEdited):
        changes = _coerce_changes(action.changes)
        values = replace(draft.values, **changes)
        errors = _revalidate(draft.field_errors, values, changes)
        return replace(
            draft,
            phase=_form_phase(draft.phase, values),
            values=values,
            field_errors=errors,
        )

    if isinstance(action, LocationLookupStarted):
        return replace(draft, locating=True, location_error=None)
    if isinstance(action, LocationResolved):
        values = replace(draft.values, location=action.location)
        errors = dict(draft.field_errors)
        errors.pop(LOCATION_FIELD, None)
        reason = validate_field(values, LOCATION_FIELD)
        if reason is not None:
            errors[LOCATION_FIELD] = reason
        return replace(
            draft,
            phase=_form_phase(draft.phase, values),
            locating=False,
            location_error=None,
            values=values,
            field_errors=errors,
        )
    if isinstance(action, LocationFailed):
        return replace(draft, locating=False, location_error=action.message)

    if isinstance(action, ValidationFailed):
        return replace(
            draft,
            phase=_form_phase(draft.phase, draft.values),
            field_errors=dict(action.errors),
        )
    if isinstance(action, SubmissionStarted):
        return replace(
            draft,
            phase=ReportPhase.submitting,
            submitting=True,
            submit_succeeded=False,
            submission_error=None,
            field_errors={},
        )
    if isinstance(action, SubmissionSucceeded):
        return replace(
            draft,
            phase=ReportPhase.submit_succeeded,
            submitting=False,
            submit_succeeded=True,
        )
    if isinstance(action, SubmissionFailed):
        return replace(
            draft,
            phase=ReportPhase.report_form_visible,
            submitting=False,
            submission_error=action.message,
        )
    raise TypeError(f"Unsupported draft action: {type(action).__name__}")


def _coerce_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown report fields: {', '.join(sorted(unknown))}")
    coerced: dict[str, Any] = {}
    for name, value in changes.items():
        coerced[name] = bool(value) if name in _BOOLEAN_FIELDS else str(value)
    return coerced


def _revalidate(
    errors: Mapping[str, FieldErrorReason],
    values: ReportFormValues,
    changes: Mapping[str, Any],
) -> dict[str, FieldErrorReason]:
    """Re-check only fields that already show an error and were just edited."""
    updated = dict(errors)
    touched = set(changes)
    if touched & _BOOLEAN_FIELDS:
        touched.add(LOCAL_POLICE_FIELD)
    for name in touched & set(errors):
        reason = validate_field(values, name)
        if reason is None:
            updated.pop(name)
        else:
            updated[name] = reason
    return updated


def _form_phase(phase: ReportPhase, values: ReportFormValues) -> ReportPhase:
    if phase in {ReportPhase.analysis_ready, ReportPhase.analysis_failed} and values.description:
        return ReportPhase.report_form_visible
    if phase is ReportPhase.image_selected and values.description:
        return ReportPhase.report_form_visible
    return phase
