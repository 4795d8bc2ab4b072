"""Domain models for students and the dashboard views derived from them."""
from typing import List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, Field, FiniteFloat, StrictInt

from app.domain.columns import ColumnName


# Infinity and NaN are valid JSON for json.load but not valid scores
Score = Union[StrictInt, FiniteFloat]
SortOrder = Literal["asc", "desc"]


class StudentRecord(BaseModel):
    """One row of the roster.

    Records are frozen once loaded; nothing in the pipeline mutates them.
    """
    student_id: str
    name: str
    class_name: str = Field(alias="class")
    persona: str
    comprehension: Score
    attention: Score
    focus: Score
    retention: Score
    assessment_score: Score

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "student_id": "S1",
                "name": "Ann",
                "class": "4B",
                "persona": "High Performer",
                "comprehension": 80,
                "attention": 70,
                "focus": 60,
                "retention": 90,
                "assessment_score": 75
            }
        }


# Ordered and immutable; identity is what the controller memoizes on
RecordSet = Tuple[StudentRecord, ...]


class ViewState(BaseModel):
    """Interaction state of a single dashboard session."""
    selected_id: str = ""
    search_text: str = ""
    sort_field: Optional[ColumnName] = None
    sort_order: SortOrder = "asc"

    class Config:
        validate_assignment = True


class AggregateSnapshot(BaseModel):
    """Per-metric mean over the displayed set, rounded to one decimal.

    Field order is the summary panel order.
    """
    comprehension: float
    attention: float
    focus: float
    retention: float
    assessment_score: float


class SkillVsScoreRow(BaseModel):
    name: str
    comprehension: Score
    attention: Score
    focus: Score
    retention: Score
    assessment_score: Score


class AttentionPoint(BaseModel):
    x: Score
    y: Score
    name: str


class RadarPoint(BaseModel):
    skill: str
    value: Score


class DashboardView(BaseModel):
    """Everything the rendering layer needs for one frame of the dashboard."""
    state: ViewState
    aggregate: Optional[AggregateSnapshot] = None
    sorted_rows: List[StudentRecord] = Field(default_factory=list)
    skill_vs_score: List[SkillVsScoreRow] = Field(default_factory=list)
    attention_vs_performance: List[AttentionPoint] = Field(default_factory=list)
    radar_profile: List[RadarPoint] = Field(default_factory=list)
    students: List[StudentRecord] = Field(default_factory=list)
