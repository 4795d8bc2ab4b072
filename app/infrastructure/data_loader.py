"""Roster loading from the static students JSON file.

The file is read once and frozen into a RecordSet. Anything that is not a
clean list of student objects becomes an empty RecordSet.
"""
import json
from functools import lru_cache
from typing import Any, Optional
from pydantic import ValidationError

from app.core.config import get_data_path
from app.core.logging import get_logger, LogTimer
from app.domain.student import RecordSet, StudentRecord

logger = get_logger(__name__)

EMPTY_RECORDS: RecordSet = ()


def parse_records(payload: Any) -> RecordSet:
    """Turn a decoded JSON payload into a RecordSet, or an empty one if malformed."""
    if not payload or not isinstance(payload, list):
        if payload:
            logger.warning(f"Expected a list of students, got {type(payload).__name__}")
        return EMPTY_RECORDS

    try:
        records = tuple(StudentRecord.model_validate(item) for item in payload)
    except ValidationError as e:
        logger.warning(
            f"Malformed student records, treating roster as empty: {e.error_count()} error(s)",
            extra={"error_type": "ValidationError"}
        )
        return EMPTY_RECORDS

    ids = [r.student_id for r in records]
    if len(set(ids)) != len(ids):
        logger.warning("Duplicate student_id values, treating roster as empty")
        return EMPTY_RECORDS

    return records


@lru_cache(maxsize=1)
def load_records(path: Optional[str] = None) -> RecordSet:
    """Load the roster file once; later calls return the same RecordSet object."""
    source = get_data_path(path)
    if not source.exists():
        logger.warning(f"Roster file not found: {source}")
        return EMPTY_RECORDS

    with LogTimer(logger, "load_records"):
        try:
            with source.open(encoding="utf-8") as handle:
                payload = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Roster file is not valid UTF-8 JSON: {e}")
            return EMPTY_RECORDS
        records = parse_records(payload)

    logger.info(f"Loaded {len(records)} students from {source}", extra={"record_count": len(records)})
    return records

