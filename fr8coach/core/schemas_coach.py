"""Schemas for the coaching endpoint and its request-scoped context."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Hard ceiling on notes cited in one prompt, whatever the slot settings say
MAX_SURFACED_NOTES = 6


class ConversationTurn(BaseModel):
    """A single prior chat turn supplied by the client."""

    role: Literal["user", "assistant"]
    content: str = ""


class CoachRequest(BaseModel):
    """Request body for POST /api/coach."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = None
    history: list[ConversationTurn] = Field(default_factory=list)
    user_email: str | None = Field(default=None, alias="userEmail")


class CoachResponse(BaseModel):
    """Successful coaching reply."""

    reply: str


class KnowledgeNote(BaseModel):
    """A topic-tagged note from the knowledge store."""

    topic: str
    content: str
    created_at: datetime | None = None


class ContactRecord(BaseModel):
    """Public profile link for a person at a detected company."""

    title: str
    profile_url: str


class CardsResponse(BaseModel):
    """Response for GET /api/cards."""

    type: str
    cards: list[dict[str, Any]]


@dataclass
class ContextBundle:
    """Per-request notes and contacts handed to the prompt builder.

    Built fresh for every request and discarded after the reply.
    """

    primary_notes: list[KnowledgeNote] = field(default_factory=list)
    fallback_notes: list[KnowledgeNote] = field(default_factory=list)
    industry_notes: list[KnowledgeNote] = field(default_factory=list)
    contacts: list[ContactRecord] = field(default_factory=list)
    company: str | None = None
    primary_slots: int = 4
    industry_slots: int = 2

    def surfaced_notes(self) -> list[KnowledgeNote]:
        """Notes in citation order: primary (fallback top-up), then industry.

        Never more than ``primary_slots + industry_slots`` notes, and never
        more than ``MAX_SURFACED_NOTES``.
        """
        primary = (self.primary_notes + self.fallback_notes)[: self.primary_slots]
        return (primary + self.industry_notes[: self.industry_slots])[:MAX_SURFACED_NOTES]
