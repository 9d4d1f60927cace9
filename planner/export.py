"""
Treatment-plan export.

Two documents are produced here:
- A conversation export: activities pulled from the assistant's numbered
  recommendations, padded with fallbacks, rendered as markdown.
- A combined plan: up to two activities the clinician selected from the
  match results, merged into one session outline.
"""

import re
import logging
from dataclasses import dataclass, field
from datetime import date as date_type
from typing import List, Optional, Sequence, Tuple

from models import Activity, PatientProfile, TherapyPlanChat
from .assistant import PlanAssistant

logger = logging.getLogger(__name__)

PLAN_ACTIVITY_COUNT = 3
PLAN_GOAL_COUNT = 3
MAX_COMBINED_ACTIVITIES = 2

# "1. **Name**" or "1. Name" up to the end of the line
_NUMBERED_ITEM = re.compile(r"\d+\.\s+\*\*([^*]+)\*\*|\d+\.\s+([^*\n]+)")


def extract_activity_names(chat: TherapyPlanChat, limit: int = PLAN_ACTIVITY_COUNT) -> List[str]:
    """First `limit` unique numbered items across the assistant's messages."""
    names: List[str] = []
    for message in chat.ai_messages:
        for match in _NUMBERED_ITEM.finditer(message.content):
            name = (match.group(1) or match.group(2)).strip()
            if name and name not in names and len(names) < limit:
                names.append(name)
    return names


def export_treatment_plan(
    chat: TherapyPlanChat,
    patient: PatientProfile,
    assistant: PlanAssistant,
    generated_on: Optional[date_type] = None
) -> str:
    """Render the conversation's recommendations as a markdown treatment plan."""
    activities = extract_activity_names(chat)
    if len(activities) < PLAN_ACTIVITY_COUNT:
        fallbacks = assistant.recommended_activity_names(patient, PLAN_ACTIVITY_COUNT)
        activities.extend(fallbacks[len(activities):])

    goals = patient.treatment_goals[:PLAN_GOAL_COUNT]
    generated_on = generated_on or date_type.today()

    logger.info(f"Exporting plan for {patient.id} from conversation {chat.id}")

    lines = [
        f"# Treatment Plan for {patient.name}",
        "",
        "## Patient Profile",
        f"- Name: {patient.name}",
        f"- Age: {patient.age}",
        f"- Cultural Background: {', '.join(patient.cultural_background)}",
        f"- Interests: {', '.join(patient.interests)}",
        "",
        "## Treatment Goals",
        *[f"{i}. {goal}" for i, goal in enumerate(goals, start=1)],
        "",
        "## Recommended Activities",
        *[f"{i}. {name}" for i, name in enumerate(activities, start=1)],
        "",
        "## Implementation Strategy",
        f"- Schedule {activities[0]} sessions twice weekly",
        f"- Incorporate {activities[1]} as a daily practice element",
        f"- Use {activities[2]} for milestone evaluations monthly",
        "",
        "## Progress Tracking",
        "- Weekly assessment of emotional regulation using standardized scales",
        "- Bi-weekly review of goal progress with patient",
        "- Monthly assessment of overall treatment efficacy",
        "",
        f"Treatment plan generated on {generated_on.isoformat()} based on AI-assisted therapy planning",
    ]
    return "\n".join(lines) + "\n"


@dataclass
class CombinedPlan:
    """Session outline merging the selected matched activities."""
    patient: PatientProfile
    activities: List[Activity]
    goals: List[Tuple[str, bool]] = field(default_factory=list)  # (goal area, is patient goal)

    @property
    def title(self) -> str:
        return " & ".join(a.title for a in self.activities)

    @property
    def therapist_note(self) -> str:
        return (
            f"This combined plan addresses {self.patient.name}'s specific needs by incorporating elements "
            "from multiple activities. Adjust the difficulty or steps as needed based on patient response. "
            f"Consider the patient's stated interests in {' and '.join(self.patient.interests[:2])} "
            "to increase engagement."
        )

    def render(self) -> str:
        focus = " and ".join(self.patient.treatment_goals[:2])
        lines = [
            f"# Treatment Plan for {self.patient.name}",
            f"Based on {self.title}",
            "",
            "## Activity Overview",
            f"This treatment plan combines elements from {len(self.activities)} activities to create a "
            f"personalized approach for {self.patient.name}'s needs, focusing on {focus}.",
            "",
            "## Treatment Goals",
            *[f"- {goal}{' (patient goal)' if is_patient_goal else ''}" for goal, is_patient_goal in self.goals],
        ]
        for i, activity in enumerate(self.activities, start=1):
            lines += [
                "",
                f"## Activity {i}: {activity.title}",
                activity.description,
                f"- Age Group: {', '.join(activity.tags.age_groups)}",
                f"- Difficulty: {activity.tags.difficulty_level.value}",
                f"- Session Length: {activity.tags.session_length.value}",
                "",
                "### Materials Needed",
                *[f"- {m}" for m in activity.materials],
            ]
        lines += ["", "## Therapist Notes", self.therapist_note]
        return "\n".join(lines) + "\n"


def build_combined_plan(
    patient: PatientProfile,
    matches: Sequence[Activity],
    selected_ids: Sequence[str]
) -> CombinedPlan:
    """
    Merge the selected activities (kept in match order, at most two).
    Raises ValueError when nothing from the matches was selected.
    """
    chosen = [a for a in matches if a.id in selected_ids][:MAX_COMBINED_ACTIVITIES]
    if not chosen:
        raise ValueError("Select at least one matched activity to build a plan")

    goals: List[Tuple[str, bool]] = []
    seen = set()
    for activity in chosen:
        for area in activity.tags.goal_areas:
            if area in seen:
                continue
            seen.add(area)
            goals.append((area, area in patient.treatment_goals))

    return CombinedPlan(patient=patient, activities=chosen, goals=goals)
