"""Session summary models.

A SessionSummary is a compact snapshot of a conversation (projects, goals,
learned mechanics, resources) that is re-injected into later chat requests
instead of the full transcript.
"""

from datetime import UTC
from datetime import datetime
from typing import Literal

from pydantic import Field

from .base import CamelCaseModel

SUMMARY_VERSION = "1.0"


class PlayerContext(CamelCaseModel):
    game_mode: Literal["survival", "creative", "hardcore", "adventure"]
    minecraft_version: str
    play_style: list[str]
    skill_level: Literal["beginner", "intermediate", "advanced"]


class Project(CamelCaseModel):
    """A building, farming or crafting project the player mentioned."""

    name: str
    type: str
    status: Literal["planning", "in-progress", "completed"]
    description: str
    progress: float = Field(ge=0, le=100)
    next_steps: list[str]
    blockers: list[str] | None = None


class KnowledgeBase(CamelCaseModel):
    mechanics_learned: list[str]
    recipes_known: list[str]
    strategies_discovered: list[str]


class Resources(CamelCaseModel):
    current_inventory: dict[str, float]
    needed: dict[str, float]
    farming_locations: list[str]


class Goals(CamelCaseModel):
    short_term: list[str]
    long_term: list[str]


class ConversationSummary(CamelCaseModel):
    total_queries: int
    topic_counts: dict[str, int]
    key_insights: list[str]
    recent_discussions: list[str]


class SummaryMetadata(CamelCaseModel):
    session_count: int
    total_playtime: str | None = None
    last_minecraft_update: str | None = None


class SessionSummary(CamelCaseModel):
    """Structured extraction of conversation state.

    ``summary_version`` is the only shape version tag; stored summaries are
    not migrated.
    """

    summary_version: Literal["1.0"]
    last_updated: str = Field(description="ISO8601 timestamp")
    current_projects: list[Project]
    knowledge_base: KnowledgeBase
    goals: Goals
    player_context: PlayerContext | None = None
    resources: Resources | None = None
    conversation_summary: ConversationSummary | None = None
    metadata: SummaryMetadata | None = None


def empty_summary() -> SessionSummary:
    """Build the minimal valid summary stamped with the current time."""
    return SessionSummary(
        summary_version=SUMMARY_VERSION,
        last_updated=datetime.now(UTC).isoformat(),
        current_projects=[],
        knowledge_base=KnowledgeBase(mechanics_learned=[], recipes_known=[], strategies_discovered=[]),
        goals=Goals(short_term=[], long_term=[]),
    )
