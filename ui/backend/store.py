"""In-memory draft store for the HTTP backend."""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable
from uuid import uuid4

from citylens.config import MAX_DRAFTS
from citylens.errors import DraftNotFoundError
from citylens.logging_utils import get_logger
from citylens.report.controller import ReportFormController

ControllerFactory = Callable[[str], ReportFormController]
EvictionHook = Callable[[str], None]

LOGGER = get_logger("store")


class DraftStore:
    """Holds one controller per browser draft; nothing is persisted.

    At most ``max_drafts`` drafts are kept. Creating one more evicts the
    least recently used draft and calls ``on_evict`` with its id.
    """

    def __init__(
        self,
        factory: ControllerFactory,
        *,
        max_drafts: int = MAX_DRAFTS,
        on_evict: EvictionHook | None = None,
    ) -> None:
        if max_drafts <= 0:
            raise ValueError("max_drafts must be greater than zero.")
        self._factory = factory
        self._max_drafts = max_drafts
        self._on_evict = on_evict
        self._controllers: OrderedDict[str, ReportFormController] = OrderedDict()

    def create(self) -> ReportFormController:
        draft_id = uuid4().hex
        controller = self._factory(draft_id)
        self._controllers[draft_id] = controller
        while len(self._controllers) > self._max_drafts:
            evicted_id, _ = self._controllers.popitem(last=False)
            LOGGER.info("Evicted draft %s; store holds %d drafts.", evicted_id, self._max_drafts)
            if self._on_evict is not None:
                self._on_evict(evicted_id)
        return controller

    def get(self, draft_id: str) -> ReportFormController:
        if draft_id not in self._controllers:
            raise DraftNotFoundError(draft_id)
        self._controllers.move_to_end(draft_id)
        return self._controllers[draft_id]

    def delete(self, draft_id: str) -> None:
        if self._controllers.pop(draft_id, None) is None:
            raise DraftNotFoundError(draft_id)

    def __contains__(self, draft_id: object) -> bool:
        return draft_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)
