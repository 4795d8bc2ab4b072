"""Pure derivations from the roster and view state to the dashboard views.

Nothing in this module holds state or touches I/O; the controller in
``app.services.dashboard`` decides when each function needs to run again.
"""
import unicodedata
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from app.domain.columns import (
    ColumnKind,
    METRIC_FIELDS,
    RADAR_AXES,
    column_kind,
    column_value,
)
from app.domain.student import (
    AggregateSnapshot,
    AttentionPoint,
    RadarPoint,
    SkillVsScoreRow,
    SortOrder,
    StudentRecord,
)


# ----------------
# HELPER FUNCTIONS
# ----------------

def _round_half_away(value: float, places: int = 1) -> float:
    """Round to ``places`` decimals, halves away from zero (2.25 -> 2.3, -2.25 -> -2.3)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _collation_key(value) -> Tuple[str, str]:
    """Locale-style text key: accents and case ignored first, exact text breaks ties."""
    text = str(value)
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


# ----------------
# SELECTION & SEARCH
# ----------------

def select_students(records: Sequence[StudentRecord], selected_id: Optional[str] = None) -> List[StudentRecord]:
    """Narrow the roster to the displayed set.

    No selection keeps every record in order. A selection keeps the record with
    that ``student_id``; an id nobody has gives an empty list, not the full roster.
    """
    if not selected_id:
        return list(records)
    return [r for r in records if r.student_id == selected_id]


def search_students(displayed: Sequence[StudentRecord], search_text: str = "") -> List[StudentRecord]:
    """Keep records whose name or persona contains ``search_text``, ignoring case."""
    if not search_text:
        return list(displayed)
    needle = search_text.lower()
    return [
        r for r in displayed
        if needle in r.name.lower() or needle in r.persona.lower()
    ]


# ----------------
# AGGREGATION
# ----------------

def compute_aggregate(displayed: Sequence[StudentRecord]) -> Optional[AggregateSnapshot]:
    """Mean of each metric over the displayed set, or None when it is empty."""
    if not displayed:
        return None
    frame = pd.DataFrame(
        [[column_value(r, m) for m in METRIC_FIELDS] for r in displayed],
        columns=list(METRIC_FIELDS),
        dtype=float,
    )
    means = frame.mean()
    return AggregateSnapshot(**{m: _round_half_away(float(means[m])) for m in METRIC_FIELDS})


# ----------------
# SORTING
# ----------------

def sort_students(
    rows: Sequence[StudentRecord],
    sort_field: Optional[str] = None,
    sort_order: SortOrder = "asc",
) -> List[StudentRecord]:
    """Order table rows by a column.

    The comparison comes from the column's declared kind. The sort is stable in
    both directions: records with equal keys keep their incoming order.
    """
    if not sort_field:
        return list(rows)

    if column_kind(sort_field) is ColumnKind.NUMERIC:
        def key(record):
            return column_value(record, sort_field)
    else:
        def key(record):
            return _collation_key(column_value(record, sort_field))

    return sorted(rows, key=key, reverse=(sort_order == "desc"))


def next_sort(
    sort_field: Optional[str],
    sort_order: SortOrder,
    clicked: str,
) -> Tuple[str, SortOrder]:
    """Sort state after a header click: same column flips, new column starts ascending."""
    column_kind(clicked)  # rejects columns outside the table
    if clicked == sort_field:
        return clicked, ("desc" if sort_order == "asc" else "asc")
    return clicked, "asc"


# ----------------
# CHART PROJECTIONS
# ----------------

def build_skill_vs_score(displayed: Sequence[StudentRecord]) -> List[SkillVsScoreRow]:
    """One bar-chart row per displayed student."""
    return [
        SkillVsScoreRow(
            name=r.name,
            comprehension=r.comprehension,
            attention=r.attention,
            focus=r.focus,
            retention=r.retention,
            assessment_score=r.assessment_score,
        )
        for r in displayed
    ]


def build_attention_vs_performance(displayed: Sequence[StudentRecord]) -> List[AttentionPoint]:
    """Scatter points of attention (x) against assessment score (y)."""
    return [
        AttentionPoint(x=r.attention, y=r.assessment_score, name=r.name)
        for r in displayed
    ]


def build_radar_profile(displayed: Sequence[StudentRecord]) -> List[RadarPoint]:
    """Five-axis profile of a single student; empty unless exactly one is displayed."""
    if len(displayed) != 1:
        return []
    student = displayed[0]
    return [
        RadarPoint(skill=label, value=column_value(student, field))
        for label, field in RADAR_AXES
    ]
