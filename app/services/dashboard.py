"""Dashboard controller: owns the view state and memoizes derived views.

Each derived value declares the inputs it depends on. It is recomputed only
when one of those inputs changed since the last read, so typing in the search
box never re-averages the cohort and sorting never rebuilds the charts.
"""
from typing import Any, Callable, Hashable, Optional, Sequence, Tuple

from app.core.logging import get_logger
from app.domain.student import (
    AggregateSnapshot,
    AttentionPoint,
    DashboardView,
    RadarPoint,
    RecordSet,
    SkillVsScoreRow,
    StudentRecord,
    ViewState,
)
from app.services import pipeline

_MISSING = object()


class Derived:
    """Single-slot cache for one derived value."""

    def __init__(self, name: str):
        self.name = name
        self.key: Any = _MISSING
        self.value: Any = None
        self.computations = 0

    def get(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        if self.key is _MISSING or self.key != key:
            self.value = compute()
            self.key = key
            self.computations += 1
        return self.value


class DashboardController:
    """Single-writer state holder for one dashboard session.

    Derived sequences are returned as tuples so readers cannot alter the cache.

    Example:
        >>> controller = DashboardController(load_records())
        >>> controller.set_selected_student_id("S1")
        >>> controller.radar_profile
        (RadarPoint(skill='Comprehension', value=80), ...)
    """

    def __init__(
        self,
        records: Sequence[StudentRecord] = (),
        state: Optional[ViewState] = None,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id
        self.logger = get_logger(__name__, {"session_id": session_id} if session_id else None)
        self._records: RecordSet = ()
        # Bumped on every load; stands in for RecordSet identity in cache keys
        self._records_version = 0
        self._state = state.model_copy() if state is not None else ViewState()
        self._cache = {
            name: Derived(name)
            for name in (
                "displayed",
                "aggregate",
                "searched",
                "sorted",
                "skill_vs_score",
                "attention_vs_performance",
                "radar_profile",
            )
        }
        if records:
            self.load(records)

    # -----------------
    # INPUTS
    # -----------------

    def load(self, records: Sequence[StudentRecord]) -> None:
        """Receive the roster; it is treated as frozen from here on."""
        self._records = tuple(records)
        self._records_version += 1
        self.logger.info(
            f"Roster loaded with {len(self._records)} students",
            extra={"record_count": len(self._records)}
        )

    def set_selected_student_id(self, student_id: Optional[str]) -> None:
        self._state.selected_id = student_id or ""
        self.logger.debug(f"Selection set to '{self._state.selected_id}'")

    def set_search_text(self, text: Optional[str]) -> None:
        self._state.search_text = text or ""
        self.logger.debug(f"Search text set to '{self._state.search_text}'")

    def on_header_click(self, field: str) -> None:
        """Apply a table header click.

        Raises:
            UnknownColumnError: If ``field`` is not a table column
        """
        sort_field, sort_order = pipeline.next_sort(
            self._state.sort_field, self._state.sort_order, field
        )
        # Field and direction move together as one event
        self._state = self._state.model_copy(
            update={"sort_field": sort_field, "sort_order": sort_order}
        )
        self.logger.debug(f"Sorting by {sort_field} {sort_order}")

    # -----------------
    # STATE
    # -----------------

    @property
    def records(self) -> RecordSet:
        return self._records

    @property
    def state(self) -> ViewState:
        """A copy of the current view state; mutate through the setters."""
        return self._state.model_copy()

    def computations(self, name: str) -> int:
        """How many times a derived value has been computed."""
        return self._cache[name].computations

    # -----------------
    # DERIVED VIEWS
    # -----------------

    def _selection_key(self):
        return (self._records_version, self._state.selected_id)

    @property
    def displayed(self) -> Tuple[StudentRecord, ...]:
        return self._cache["displayed"].get(
            self._selection_key(),
            lambda: tuple(pipeline.select_students(self._records, self._state.selected_id)),
        )

    @property
    def aggregate(self) -> Optional[AggregateSnapshot]:
        return self._cache["aggregate"].get(
            self._selection_key(),
            lambda: pipeline.compute_aggregate(self.displayed),
        )

    @property
    def searched_rows(self) -> Tuple[StudentRecord, ...]:
        key = self._selection_key() + (self._state.search_text,)
        return self._cache["searched"].get(
            key,
            lambda: tuple(pipeline.search_students(self.displayed, self._state.search_text)),
        )

    @property
    def sorted_rows(self) -> Tuple[StudentRecord, ...]:
        key = self._selection_key() + (
            self._state.search_text,
            self._state.sort_field,
            self._state.sort_order,
        )
        return self._cache["sorted"].get(
            key,
            lambda: tuple(pipeline.sort_students(
                self.searched_rows, self._state.sort_field, self._state.sort_order
            )),
        )

    @property
    def skill_vs_score(self) -> Tuple[SkillVsScoreRow, ...]:
        return self._cache["skill_vs_score"].get(
            self._selection_key(),
            lambda: tuple(pipeline.build_skill_vs_score(self.displayed)),
        )

    @property
    def attention_vs_performance(self) -> Tuple[AttentionPoint, ...]:
        return self._cache["attention_vs_performance"].get(
            self._selection_key(),
            lambda: tuple(pipeline.build_attention_vs_performance(self.displayed)),
        )

    @property
    def radar_profile(self) -> Tuple[RadarPoint, ...]:
        return self._cache["radar_profile"].get(
            self._selection_key(),
            lambda: tuple(pipeline.build_radar_profile(self.displayed)),
        )

    def view(self) -> DashboardView:
        """Bundle every derived view for the rendering layer."""
        return DashboardView(
            state=self.state,
            aggregate=self.aggregate,
            sorted_rows=list(self.sorted_rows),
            skill_vs_score=list(self.skill_vs_score),
            attention_vs_performance=list(self.attention_vs_performance),
            radar_profile=list(self.radar_profile),
            students=list(self._records),
        )
