"""
Eligibility Rules for activity matching.

This module answers the binary question: "Is Activity X suitable for Patient Y?"
Two rules apply, and both must pass:
1. Goal overlap: an activity goal tag contains one of the patient's goals.
2. Age bracket: an age-group tag contains the keyword of the patient's bracket.

Both checks are plain substring containment, not exact tag equality.
"""

from enum import Enum
from typing import List, Optional
from dataclasses import dataclass

from models import Activity, PatientProfile


class AgeBracket(str, Enum):
    """Life-stage brackets. The value is the keyword an age-group tag must contain."""
    CHILDREN = "Children"
    ADOLESCENT = "Adolescent"
    ADULT = "Adult"
    SENIOR = "Senior"


# Upper bounds (exclusive) for each bracket, checked in order
BRACKET_LIMITS = (
    (13, AgeBracket.CHILDREN),
    (18, AgeBracket.ADOLESCENT),
    (65, AgeBracket.ADULT),
)


@dataclass
class MatchRejection:
    """Detailed reason an activity was filtered out."""
    criterion: str  # "Goal" or "Age"
    reason: str
    activity_id: str
    patient_id: str


def age_bracket(age: int) -> AgeBracket:
    """Map an age in years to its bracket."""
    if age < 0:
        raise ValueError(f"Age cannot be negative: {age}")
    for limit, bracket in BRACKET_LIMITS:
        if age < limit:
            return bracket
    return AgeBracket.SENIOR


def matched_goals(patient: PatientProfile, activity: Activity) -> List[str]:
    """
    Patient goals that appear inside at least one of the activity's goal tags.
    Case-insensitive; only the tag-contains-goal direction counts.
    """
    areas = [area.lower() for area in activity.tags.goal_areas]
    hits = []
    for goal in patient.treatment_goals:
        needle = goal.lower()
        if any(needle in area for area in areas):
            hits.append(goal)
    return hits


def goal_overlap(patient: PatientProfile, activity: Activity) -> bool:
    return bool(matched_goals(patient, activity))


def age_eligible(patient: PatientProfile, activity: Activity) -> bool:
    # Case-sensitive, same as the tag labels ("Adults (18+)" contains "Adult")
    keyword = age_bracket(patient.age).value
    return any(keyword in group for group in activity.tags.age_groups)


def evaluate(patient: PatientProfile, activity: Activity) -> Optional[MatchRejection]:
    """
    Master check. Returns None if eligible, a MatchRejection otherwise.
    The goal rule is reported first when both fail.
    """
    if not goal_overlap(patient, activity):
        return MatchRejection(
            criterion="Goal",
            reason=f"No goal of {patient.name} found in {activity.tags.goal_areas}",
            activity_id=activity.id,
            patient_id=patient.id
        )

    if not age_eligible(patient, activity):
        bracket = age_bracket(patient.age)
        return MatchRejection(
            criterion="Age",
            reason=f"No '{bracket.value}' tag in {activity.tags.age_groups} (age {patient.age})",
            activity_id=activity.id,
            patient_id=patient.id
        )

    return None
