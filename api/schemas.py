"""Pydantic schemas for the HTTP API."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from contracts import ChatMessage, ContractModel, InterviewState, MessageRole, PositionWithBullets, StepResponse
from interview_session import TurnResult
from storage import BulletMatch, SessionRecord


class MessageIn(BaseModel):
    role: MessageRole
    content: str


class InterviewRequest(BaseModel):
    messages: List[MessageIn] = Field(min_length=1)


class TurnRequest(BaseModel):
    message: str = Field(min_length=1)


class SessionView(ContractModel):
    session_id: str
    status: str
    state: InterviewState
    created_at: str
    updated_at: str

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionView":
        return cls(
            session_id=record.session_id,
            status=record.state.status,
            state=record.state,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class TurnView(ContractModel):
    session_id: str
    status: str
    reply: ChatMessage
    step: StepResponse
    state: InterviewState
    added: List[PositionWithBullets] = Field(default_factory=list)

    @classmethod
    def from_result(cls, session_id: str, result: TurnResult) -> "TurnView":
        return cls(
            session_id=session_id,
            status=result.state.status,
            reply=result.reply,
            step=result.step,
            state=result.state,
            added=result.added,
        )


class SpeakRequest(BaseModel):
    text: Optional[str] = None
    voice: Optional[str] = None


class EmbedRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    type: Optional[str] = None
    bullet_id: Optional[str] = Field(default=None, alias="bulletId")  # store the vector on this bullet


class EmbedResponse(BaseModel):
    embedding: List[float]


class TranscriptionResponse(BaseModel):
    text: str


class BulletUpdate(BaseModel):
    current_text: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    hard_skills: Optional[List[str]] = None
    soft_skills: Optional[List[str]] = None
    metrics: Optional[Dict[str, Any]] = None
    assumptions: Optional[str] = None


class AccountResetResponse(BaseModel):
    deleted: Dict[str, int]


class JobDraftRequest(BaseModel):
    text: Optional[str] = None


class JobDraftSelection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected_bullet_ids: List[str] = Field(alias="selectedBulletIds")


class JobDraftCreated(ContractModel):
    draft_id: str
    matched_bullet_ids: List[str]
    selected_bullet_ids: List[str]
    matches: List[BulletMatch]
