"""
Therapy Activity data models for the Activity Matcher.
"""

from enum import Enum
from typing import List
from pydantic import BaseModel, Field, field_validator, ConfigDict
from datetime import date


class Difficulty(str, Enum):
    """How demanding an activity is for the patient."""
    EASY = "Easy"
    MEDIUM = "Medium"
    CHALLENGING = "Challenging"


class SessionLength(str, Enum):
    """Bucketed session durations."""
    QUARTER_TO_HALF_HOUR = "15-30 minutes"
    HALF_HOUR = "30-45 minutes"
    THREE_QUARTER_HOUR = "45-60 minutes"
    HOUR_PLUS = "60-90 minutes"
    EXTENDED = "90+ minutes"


class ActivityTags(BaseModel):
    """Descriptive tags used for browsing and matching."""

    model_config = ConfigDict(frozen=True)

    goal_areas: List[str] = Field(
        default_factory=list,
        description="Therapeutic objectives this activity serves (e.g. 'Emotional Regulation')"
    )
    age_groups: List[str] = Field(
        default_factory=list,
        description="Age group labels, e.g. 'Children (6-12)'. Matched by keyword containment."
    )
    difficulty_level: Difficulty = Field(description="Difficulty for the patient")
    cultural_context: List[str] = Field(default_factory=list, description="Cultural fit labels")
    session_length: SessionLength = Field(description="Expected session duration bucket")

    @field_validator('goal_areas', 'age_groups', 'cultural_context')
    @classmethod
    def drop_blank_tags(cls, v):
        """Drop whitespace-only tags so substring matching never sees ''. Others are kept verbatim."""
        return [tag for tag in v if tag.strip()]


class Activity(BaseModel):
    """
    A catalogued therapeutic exercise.
    Immutable once loaded; matching only reads it.
    """

    # --- Core Identity ---
    id: str = Field(description="Unique identifier for the activity")
    title: str = Field(min_length=1, description="Human-readable name")
    description: str = Field(default="", description="Free-text summary")

    # --- Classification ---
    tags: ActivityTags = Field(description="Goal, age, difficulty and context tags")

    # --- Delivery ---
    materials: List[str] = Field(default_factory=list, description="Items needed for the session")
    steps: List[str] = Field(default_factory=list, description="Ordered facilitation steps")

    # --- Attribution ---
    created_by: str = Field(default="", description="Author of the activity")
    created_at: date = Field(default_factory=date.today, description="Date the activity was published")

    effectiveness: float = Field(ge=1.0, le=5.0, description="Static rating used only as a ranking key")

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "act1",
            "title": "Color Emotion Cards",
            "description": "Patients create cards associating colors with emotions.",
            "tags": {
                "goal_areas": ["Emotional Regulation", "Self-Expression"],
                "age_groups": ["Children (6-12)", "Adolescents (13-17)"],
                "difficulty_level": "Easy",
                "cultural_context": ["Western", "Universal"],
                "session_length": "30-45 minutes"
            },
            "materials": ["Colored paper", "Markers/crayons"],
            "steps": ["Discuss emotions", "Create cards"],
            "created_by": "Dr. Sarah Johnson",
            "created_at": "2025-05-15",
            "effectiveness": 4.5
        }
    })
