"""
Therapy-plan conversation models.

A conversation is the record the plan assistant writes to: an intake prompt,
the assistant's recommendations and any follow-up exchange.
"""

from typing import List
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from datetime import datetime, timezone


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are read as UTC so every stored time is comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Sender(str, Enum):
    """Who wrote a message."""
    AI = "ai"
    USER = "user"


class ChatMessage(BaseModel):
    """A single message in a therapy-plan conversation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique message identifier")
    sender: Sender = Field(description="Author of the message")
    content: str = Field(description="Message body (markdown allowed)")
    timestamp: datetime = Field(description="When the message was written (UTC if no offset given)")

    @field_validator('timestamp')
    @classmethod
    def assume_utc(cls, v):
        return _as_utc(v)


class TherapyPlanChat(BaseModel):
    """
    A conversation about one patient's treatment plan.
    Updates produce new instances; see planner.assistant.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique conversation identifier")
    patient_id: str = Field(description="Patient this conversation is about")
    title: str = Field(min_length=1, description="Conversation title")
    messages: List[ChatMessage] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator('created_at', 'updated_at')
    @classmethod
    def assume_utc(cls, v):
        return _as_utc(v)

    @model_validator(mode='after')
    def validate_timestamps(self):
        if self.updated_at < self.created_at:
            raise ValueError("updated_at cannot be before created_at")
        return self

    @property
    def ai_messages(self) -> List[ChatMessage]:
        return [m for m in self.messages if m.sender == Sender.AI]
