"""Farm context and farm activity records read from the relational store."""

from datetime import date
from enum import Enum

from pydantic import BaseModel


class FarmContext(BaseModel):
    """Farm attributes the insight pipelines need."""

    id: int
    name: str = ""
    region: str | None = None
    crop: str | None = None
    crop_variety: str | None = None
    crop_stage: str | None = None
    planting_date: date | None = None
    latitude: float | None = None
    longitude: float | None = None
    area: float | None = None


class ExpenseRecord(BaseModel):
    """A logged farm expense."""

    id: int | None = None
    farm_id: int
    date: date
    type: str = "other"
    description: str = ""
    cost: float = 0.0


class ActivityType(str, Enum):
    """Logged field activity kinds used as inference context."""

    IRRIGATION = "irrigation"
    SPRAY = "spray"
    FERTIGATION = "fertigation"


class ActivityRecord(BaseModel):
    """A recent field activity, flattened from the per-kind record tables."""

    id: int
    activity_type: ActivityType
    date: date
    notes: str = ""
