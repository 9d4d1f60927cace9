"""
Template-driven plan assistant.

Produces the "AI" side of a therapy-plan conversation from canned templates:
1. An intake prompt summarizing the patient profile.
2. An opening recommendation of three activities (matched, or fallbacks).
3. Keyword-routed follow-up replies.

Conversations are immutable; every update returns a new TherapyPlanChat.
"""

import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone, timedelta
from typing import Callable, Dict, List, Optional

from models import ChatMessage, PatientProfile, Sender, TherapyPlanChat
from matcher.engine import ActivityMatcher

logger = logging.getLogger(__name__)

# Keyword groups checked in order against the lower-cased message
REPLY_ROUTES = (
    ("goals", ("goal", "plan")),
    ("activities", ("activity", "exercise")),
    ("challenges", ("challenge", "difficult")),
)

DEFAULT_GOAL = "General Wellbeing"
DEFAULT_CHALLENGE = "current challenges"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _first(items: List[str], index: int = 0, default: Optional[str] = None) -> Optional[str]:
    """items[index], falling back to items[0], then to default."""
    if len(items) > index:
        return items[index]
    if items:
        return items[0]
    return default


def standardized_prompt(patient: PatientProfile) -> str:
    """Intake prompt that opens every new conversation."""
    issues = " and ".join(c.lower() for c in patient.challenges)
    interests = ""
    if patient.interests:
        interests = f"The patient's interests include {', '.join(patient.interests)}."

    return (
        f"Patient: {patient.name}, Age: {patient.age}, {'/'.join(patient.cultural_background)}\n\n"
        f"Presenting Issues: Patient {issues}.\n\n"
        f"Detailed Description: {patient.additional_notes} {interests}\n\n"
        f"Treatment Goals: {', '.join(patient.treatment_goals)}\n\n"
        "Please identify the 3 most relevant therapeutic activities for this patient based on "
        "their needs and profile. Then provide a comprehensive therapy plan incorporating these activities."
    )


class PlanAssistant:
    """
    Canned-response assistant backed by the activity matcher.
    `clock` is injectable so conversations can be timestamped deterministically.
    """

    def __init__(self, matcher: ActivityMatcher, clock: Callable[[], datetime] = _utcnow):
        self.matcher = matcher
        self.clock = clock

    # --- Recommendations ---

    def recommended_activity_names(self, patient: PatientProfile, count: int = 3) -> List[str]:
        """
        Titles of the first `count` recommendations, matching the patient once.
        Positions past the matched activities fall back to names composed
        from goals and interests.
        """
        titles = [a.title for a in self.matcher.match_profile(patient)]

        goals = patient.treatment_goals
        interests = patient.interests
        fallbacks = [
            f"{_first(goals, 0, DEFAULT_GOAL)} through {_first(interests, 0, 'Creative Expression')}",
            f"Structured {_first(goals, 1, DEFAULT_GOAL)} Exercises",
            f"{_first(interests, 1, 'Personalized')}-Based Therapy Sessions",
        ]

        names = []
        for index in range(count):
            if index < len(titles):
                names.append(titles[index])
            elif index < len(fallbacks):
                names.append(fallbacks[index])
            else:
                names.append(f"Tailored Therapy Activity {index + 1}")
        return names

    def recommended_activity_name(self, patient: PatientProfile, index: int) -> str:
        """Title of the index-th recommendation (see recommended_activity_names)."""
        return self.recommended_activity_names(patient, index + 1)[index]

    def opening_recommendation(self, patient: PatientProfile) -> str:
        goals = patient.treatment_goals
        interests = patient.interests
        challenges = patient.challenges
        names = self.recommended_activity_names(patient, 3)

        return (
            f"Based on {patient.name}'s profile and needs, I recommend these 3 most relevant therapeutic activities:\n\n"
            f"1. **{names[0]}**: This activity supports {_first(goals, 0, DEFAULT_GOAL)} by engaging the patient "
            f"in structured exercises that build on their interest in {_first(interests, 0, 'relevant areas')}.\n\n"
            f"2. **{names[1]}**: Addresses {_first(goals, 1, DEFAULT_GOAL)} through guided practice and helps "
            f"overcome challenges with {_first(challenges, 0, DEFAULT_CHALLENGE)}.\n\n"
            f"3. **{names[2]}**: This activity incorporates {_first(interests, 1, 'personal interests')} to build "
            f"skills in {_first(goals, 2, DEFAULT_GOAL)} while addressing {_first(challenges, 1, DEFAULT_CHALLENGE)}.\n\n"
            "Would you like me to elaborate on any of these activities or suggest a specific implementation plan?"
        )

    # --- Replies ---

    def reply_to(self, patient: PatientProfile, message: str) -> str:
        """Pick a canned reply by the first keyword group found in the message."""
        text = message.lower()
        route = "generic"
        for name, keywords in REPLY_ROUTES:
            if any(k in text for k in keywords):
                route = name
                break

        logger.debug(f"Reply route for {patient.id}: {route}")

        if route == "goals":
            return (
                f"Based on {patient.name}'s profile, I recommend focusing on these treatment goals: "
                f"{', '.join(patient.treatment_goals)}. Would you like me to elaborate on specific "
                "strategies for any of these areas?"
            )
        if route == "activities":
            return (
                f"I can suggest several activities tailored to {patient.name}'s interests in "
                f"{' and '.join(patient.interests[:2])}. These would support the goals of "
                f"{_first(patient.treatment_goals, 0, DEFAULT_GOAL)} and address the challenges of "
                f"{_first(patient.challenges, 0, DEFAULT_CHALLENGE)}. Would you like me to provide "
                "specific activity recommendations?"
            )
        if route == "challenges":
            return (
                f"I understand {patient.name} faces challenges with {' and '.join(patient.challenges)}. "
                "I've developed specific strategies to address these based on successful approaches for "
                "patients with similar profiles. Would you like me to share these strategies?"
            )
        return (
            f"Thank you for your input about {patient.name}. I've analyzed this information alongside "
            "their profile data. I can help with developing personalized therapy plans, suggesting specific "
            "activities, or addressing particular challenges. What specific aspect would you like me to focus on?"
        )

    # --- Conversation updates ---

    def _message(self, sender: Sender, content: str, timestamp: datetime) -> ChatMessage:
        return ChatMessage(
            id=f"msg-{uuid.uuid4().hex[:12]}-{sender.value}",
            sender=sender,
            content=content,
            timestamp=timestamp
        )

    def start_chat(self, patient: PatientProfile, title: str) -> TherapyPlanChat:
        """Open a conversation with the intake prompt and the opening recommendation."""
        if not title or not title.strip():
            raise ValueError("Conversation title cannot be blank")

        now = self.clock()
        messages = [
            self._message(Sender.USER, standardized_prompt(patient), now),
            self._message(Sender.AI, self.opening_recommendation(patient), now + timedelta(seconds=2)),
        ]
        chat = TherapyPlanChat(
            id=f"chat-{uuid.uuid4().hex[:12]}",
            patient_id=patient.id,
            title=title.strip(),
            messages=messages,
            created_at=now,
            updated_at=messages[-1].timestamp
        )
        logger.info(f"Started conversation '{chat.title}' for {patient.id}")
        return chat

    def send_message(self, chat: TherapyPlanChat, patient: PatientProfile, text: str) -> TherapyPlanChat:
        """Append the user's message and the canned reply. The input chat is left unchanged."""
        if not text or not text.strip():
            raise ValueError("Message cannot be blank")
        if chat.patient_id != patient.id:
            raise ValueError(f"Conversation {chat.id} belongs to {chat.patient_id}, not {patient.id}")

        now = self.clock()
        user_msg = self._message(Sender.USER, text, now)
        ai_msg = self._message(Sender.AI, self.reply_to(patient, text), now)

        # Message timestamps went through validation, so they are UTC-aware
        return chat.model_copy(update={
            "messages": [*chat.messages, user_msg, ai_msg],
            "updated_at": max(ai_msg.timestamp, chat.updated_at),
        })


class ChatHistory:
    """In-memory store of conversations, grouped by patient."""

    def __init__(self, chats: Optional[List[TherapyPlanChat]] = None):
        self._by_patient: Dict[str, List[TherapyPlanChat]] = defaultdict(list)
        self._ids = set()
        for chat in chats or []:
            self.add(chat)

    def add(self, chat: TherapyPlanChat) -> None:
        if chat.id in self._ids:
            raise ValueError(f"Duplicate conversation id: {chat.id}")
        self._ids.add(chat.id)
        # Newest first, like the conversation list
        self._by_patient[chat.patient_id].insert(0, chat)

    def replace(self, chat: TherapyPlanChat) -> None:
        chats = self._by_patient.get(chat.patient_id, [])
        for i, existing in enumerate(chats):
            if existing.id == chat.id:
                chats[i] = chat
                return
        raise KeyError(f"Unknown conversation {chat.id}")

    def chats_for(self, patient_id: str) -> List[TherapyPlanChat]:
        return list(self._by_patient.get(patient_id, []))

    def latest_for(self, patient_id: str) -> Optional[TherapyPlanChat]:
        """Most recently updated conversation, or None."""
        chats = self._by_patient.get(patient_id)
        if not chats:
            return None
        return max(chats, key=lambda c: c.updated_at)
