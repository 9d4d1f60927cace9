"""
Patient profile data model.
"""

from typing import List
from pydantic import BaseModel, Field, ConfigDict


class PatientProfile(BaseModel):
    """
    An individual's treatment goals, age, interests and challenges.
    Goals and challenges keep their entry order; the plan assistant
    refers to them by position.
    """

    id: str = Field(description="Unique identifier")
    name: str = Field(min_length=1, description="Full name of the patient")
    age: int = Field(ge=0, le=130, description="Age in whole years")

    cultural_background: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    treatment_goals: List[str] = Field(default_factory=list, description="Ordered treatment goals")
    challenges: List[str] = Field(default_factory=list, description="Ordered presenting challenges")
    preferred_activities: List[str] = Field(
        default_factory=list,
        description="Preferred activity style tags (e.g. 'Art-based')"
    )
    additional_notes: str = Field(default="", description="Free-text clinician notes")

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "pat1",
            "name": "Alex Thompson",
            "age": 10,
            "cultural_background": ["American"],
            "interests": ["Drawing", "Space"],
            "treatment_goals": ["Emotional Regulation", "Social Skills"],
            "challenges": ["Difficulty expressing emotions"],
            "preferred_activities": ["Art-based"],
            "additional_notes": "Responds well to visual schedules."
        }
    })
