"""Tests for simulated report delivery."""

from __future__ import annotations

import asyncio

import pytest

from citylens.report.delivery import SimulatedReportSink, SubmittedReport
from citylens.report.schemas import ReportFormValues


def _report(email: str = "") -> SubmittedReport:
    return SubmittedReport(
        image_name="report.png",
        values=ReportFormValues(
            description="A pothole is visible in the center of the road.",
            location="Main St & Park Ave",
            email=email,
            send_to_local_police=True,
            send_to_city_hall=True,
        ),
    )


def test_log_payload_masks_email_and_lists_recipients() -> None:
    payload = _report("john@example.org").to_log_payload()
    assert payload["email"] == "j***@example.org"
    assert payload["recipients"] == ["local_police", "city_hall"]
    assert payload["image"] == "report.png"
    assert payload["report_id"]


def test_log_payload_keeps_empty_email() -> None:
    assert _report().to_log_payload()["email"] == ""


def test_simulated_sink_records_delivery() -> None:
    sink = SimulatedReportSink(delay_seconds=0)
    report = _report()
    asyncio.run(sink.deliver(report))
    assert list(sink.delivered) == [report]


def test_simulated_sink_rejects_negative_delay() -> None:
    with pytest.raises(ValueError):
        SimulatedReportSink(delay_seconds=-1)


def test_reports_get_unique_ids() -> None:
    assert _report().report_id != _report().report_id


def test_simulated_sink_keeps_only_recent_reports() -> None:
    sink = SimulatedReportSink(delay_seconds=0, history_limit=2)
    reports = [_report(f"resident{index}@example.org") for index in range(3)]
    for report in reports:
        asyncio.run(sink.deliver(report))
    assert list(sink.delivered) == reports[1:]
