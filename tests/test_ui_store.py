from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from citylens.config import CityLensSettings
from citylens.errors import DraftNotFoundError
from citylens.notifications import Notification, NotificationBroker
from citylens.providers.mock_provider import MockProvider
from citylens.report.controller import ReportFormController
from citylens.report.delivery import SimulatedReportSink
from ui.backend.app import create_app
from ui.backend.store import DraftStore


def _factory(draft_id: str) -> ReportFormController:
    return ReportFormController(
        draft_id=draft_id,
        provider=MockProvider.describing("A pothole is visible in the center of the road."),
        sink=SimulatedReportSink(delay_seconds=0),
    )


def test_store_evicts_oldest_draft_beyond_limit() -> None:
    evicted: list[str] = []
    store = DraftStore(_factory, max_drafts=2, on_evict=evicted.append)

    first = store.create()
    second = store.create()
    third = store.create()

    assert len(store) == 2
    assert evicted == [first.draft_id]
    assert first.draft_id not in store
    with pytest.raises(DraftNotFoundError):
        store.get(first.draft_id)
    assert store.get(second.draft_id) is second
    assert store.get(third.draft_id) is third


def test_recently_used_draft_survives_eviction() -> None:
    store = DraftStore(_factory, max_drafts=2)
    first = store.create()
    second = store.create()

    store.get(first.draft_id)
    store.create()

    assert first.draft_id in store
    assert second.draft_id not in store


def test_store_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        DraftStore(_factory, max_drafts=0)


def test_app_holds_at_most_max_drafts_and_forgets_their_notifications() -> None:
    app = create_app(
        CityLensSettings(provider="mock", submit_delay_seconds=0, max_drafts=3),
        provider=MockProvider.describing("A pothole is visible in the center of the road."),
        sink=SimulatedReportSink(delay_seconds=0),
    )
    client = TestClient(app)
    state = app.state.citylens

    first_id = client.post("/api/drafts").json()["draft_id"]
    broker: NotificationBroker = state.broker
    broker.publish(Notification.create(draft_id=first_id, title="Location Error", description="x"))

    for _ in range(50):
        assert client.post("/api/drafts").status_code == 200

    assert len(state.drafts) == 3
    assert client.get(f"/api/drafts/{first_id}").status_code == 404
    assert broker.history(first_id) == []
