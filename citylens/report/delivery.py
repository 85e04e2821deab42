"""Report delivery collaborators.

Nothing here talks to police or city hall systems. The simulated sink logs
the submitted payload and resolves after a fixed delay; a real integration
implements :class:`ReportSink` and is handed to the controller instead.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import uuid4

from citylens.config import SUBMIT_DELAY_SECONDS
from citylens.logging_utils import get_logger
from citylens.report.schemas import ReportFormValues
from citylens.security import mask_email

LOGGER = get_logger("delivery")


@dataclass(frozen=True)
class SubmittedReport:
    """Validated report handed to a sink."""

    image_name: str | None
    values: ReportFormValues
    report_id: str = field(default_factory=lambda: uuid4().hex)
    submitted_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_log_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"report_id": self.report_id, "image": self.image_name}
        payload.update(self.values.to_dict())
        if payload["email"]:
            payload["email"] = mask_email(payload["email"])
        payload["recipients"] = list(self.values.recipients)
        return payload


class ReportSink(Protocol):
    """Delivery channel for submitted reports."""

    async def deliver(self, report: SubmittedReport) -> None:
        """Deliver the report or raise."""
        ...


class SimulatedReportSink:
    """Logs the report and waits a fixed delay to mimic a send.

    Only the most recent ``history_limit`` reports are kept in ``delivered``.
    """

    def __init__(
        self, *, delay_seconds: float = SUBMIT_DELAY_SECONDS, history_limit: int = 20
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be zero or greater.")
        self.delay_seconds = delay_seconds
        self.delivered: deque[SubmittedReport] = deque(maxlen=history_limit)

    async def deliver(self, report: SubmittedReport) -> None:
        LOGGER.info("Submitting report: %s", report.to_log_payload())
        await asyncio.sleep(self.delay_seconds)
        self.delivered.append(report)
