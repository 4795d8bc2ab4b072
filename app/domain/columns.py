"""Static column schema for the roster table.

Every sortable column declares its kind up front, so the sorter never has to
inspect values at comparison time.
"""
from enum import Enum
from typing import Any, Dict, Literal, Tuple, get_args


class ColumnKind(str, Enum):
    NUMERIC = "numeric"
    TEXT = "text"


ColumnName = Literal[
    "student_id",
    "name",
    "class",
    "comprehension",
    "attention",
    "focus",
    "retention",
    "assessment_score",
    "persona",
]

# Table header order
TABLE_COLUMNS: Tuple[str, ...] = get_args(ColumnName)

COLUMN_KINDS: Dict[str, ColumnKind] = {
    "student_id": ColumnKind.TEXT,
    "name": ColumnKind.TEXT,
    "class": ColumnKind.TEXT,
    "comprehension": ColumnKind.NUMERIC,
    "attention": ColumnKind.NUMERIC,
    "focus": ColumnKind.NUMERIC,
    "retention": ColumnKind.NUMERIC,
    "assessment_score": ColumnKind.NUMERIC,
    "persona": ColumnKind.TEXT,
}

# Averaged in the summary panel, in display order
METRIC_FIELDS: Tuple[str, ...] = (
    "comprehension",
    "attention",
    "focus",
    "retention",
    "assessment_score",
)

# (label, field) pairs for the single-student radar chart
RADAR_AXES: Tuple[Tuple[str, str], ...] = (
    ("Comprehension", "comprehension"),
    ("Attention", "attention"),
    ("Focus", "focus"),
    ("Retention", "retention"),
    ("Assessment", "assessment_score"),
)

# Column names that differ from the model attribute holding them
_ATTRIBUTES = {"class": "class_name"}


class UnknownColumnError(ValueError):
    """Raised when a sort is requested on a column outside the table schema."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(
            f"Unknown column '{column}'. Expected one of: {', '.join(TABLE_COLUMNS)}"
        )


def column_kind(column: str) -> ColumnKind:
    """Return the declared kind of a table column."""
    try:
        return COLUMN_KINDS[column]
    except KeyError:
        raise UnknownColumnError(column) from None


def column_value(record: Any, column: str) -> Any:
    """Read a table column off a student record."""
    return getattr(record, _ATTRIBUTES.get(column, column))
