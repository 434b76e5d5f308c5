from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .intent import UserIntent
from .page import PageDocument, PageType


class KnowledgeDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    content: str
    similarity_score: Optional[float] = None
    source_type: Optional[str] = None
    source_url: Optional[str] = None
    persona_tags: List[str] = Field(default_factory=list)
    pain_point_tags: List[str] = Field(default_factory=list)


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class PageContext(BaseModel):
    """What the user interacted with before sending the message."""

    model_config = ConfigDict(extra="ignore")

    context: Optional[str] = None
    source: Optional[str] = None
    text: Optional[str] = None


class PageGenerationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_message: str
    page_type: Optional[PageType] = None
    persona: Dict[str, float] = Field(default_factory=dict)
    persona_description: Optional[str] = None
    knowledge_documents: List[KnowledgeDocument] = Field(default_factory=list)
    conversation_history: List[ConversationTurn] = Field(default_factory=list)
    page_context: Optional[PageContext] = None
    interaction_source: Optional[str] = None
    precomputed_intent: Optional[UserIntent] = None
    session_id: Optional[str] = None


@dataclass
class AttemptRecord:
    attempt: int
    strategy: str
    outcome: str
    elapsed_ms: int
    detail: str = ""


@dataclass
class GenerationResult:
    success: bool
    page: Optional[PageDocument] = None
    error: Optional[str] = None
    retry_count: int = 0
    generation_time_ms: int = 0
    intent: Optional[UserIntent] = None
    page_type: Optional[str] = None
    strategy_used: Optional[str] = None
    attempts: List[AttemptRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "retryCount": self.retry_count,
            "generationTimeMs": self.generation_time_ms,
        }
        if self.page is not None:
            payload["page"] = self.page.to_wire()
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass
class ChatTurnResult:
    """Chat reply and page generated for the same user message."""

    reply: str
    page_result: GenerationResult
    reply_degraded: bool = False


__all__ = [
    "KnowledgeDocument",
    "ConversationTurn",
    "PageContext",
    "PageGenerationRequest",
    "AttemptRecord",
    "GenerationResult",
    "ChatTurnResult",
]
