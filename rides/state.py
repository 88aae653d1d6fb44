from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from rides.data import Dataset
from rides.filters import DEFAULT_FILTERS, FilterCriteria, category_options, normalize_filters
from rides.metrics_overview import compute_overview


logger = logging.getLogger(__name__)


def release_handle(handle: Any) -> None:
    """Dispose a chart handle via whichever of release/destroy/empty it offers."""
    for name in ("release", "destroy", "empty"):
        hook = getattr(handle, name, None)
        if callable(hook):
            hook()
            return


@dataclass
class DashboardState:
    """Session state owned by the dashboard controller.

    Chart handles are stored per slot so each can be released before the slot
    is drawn again.
    """

    dataset: Dataset
    criteria: FilterCriteria = DEFAULT_FILTERS
    charts: Dict[str, Any] = field(default_factory=dict)

    @property
    def categories(self):
        return category_options(self.dataset.frame, self.dataset.roles)

    def replace_chart(self, slot: str, handle: Any) -> Any:
        previous = self.charts.pop(slot, None)
        if previous is not None and previous is not handle:
            release_handle(previous)
        self.charts[slot] = handle
        return handle

    def release_chart(self, slot: str) -> None:
        previous = self.charts.pop(slot, None)
        if previous is not None:
            release_handle(previous)

    def release_all(self) -> None:
        for slot in list(self.charts):
            self.release_chart(slot)

    def forget_charts(self) -> None:
        """Drop handles without releasing them, e.g. ones a UI rerun already discarded."""
        self.charts.clear()

    def apply(self, raw: Optional[Mapping[str, Any]] = None, *, preview_rows: Optional[int] = None) -> Dict[str, Any]:
        self.criteria = normalize_filters(raw)
        logger.debug("Applying filters %s", self.criteria)
        return compute_overview(self.dataset, self.criteria, preview_rows=preview_rows)

    def reset(self, *, preview_rows: Optional[int] = None) -> Dict[str, Any]:
        self.criteria = DEFAULT_FILTERS
        return compute_overview(self.dataset, self.criteria, preview_rows=preview_rows)

    def replace_dataset(self, dataset: Dataset) -> None:
        self.release_all()
        self.dataset = dataset
        self.criteria = DEFAULT_FILTERS
