"""
Data models package for the Therapy Activity Matcher.

This package exports the three groups of records the system works with:
1. Catalog (Activity, ActivityTags)
2. People (PatientProfile)
3. Conversations (TherapyPlanChat, ChatMessage)
"""

from .activity import (
    Activity,
    ActivityTags,
    Difficulty,
    SessionLength
)

from .patient import (
    PatientProfile
)

from .chat import (
    ChatMessage,
    Sender,
    TherapyPlanChat
)

__all__ = [
    # --- Catalog Models ---
    "Activity",
    "ActivityTags",
    "Difficulty",
    "SessionLength",

    # --- Patient Models ---
    "PatientProfile",

    # --- Conversation Models ---
    "ChatMessage",
    "Sender",
    "TherapyPlanChat",
]
