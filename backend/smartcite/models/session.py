"""Conversation domain models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["system", "user", "assistant"]


class Turn(BaseModel):
    """One role-tagged message in a conversation history."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> "Turn":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Turn":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Turn":
        return cls(role="assistant", content=content)


class StartSessionResult(BaseModel):
    """Outcome of creating a session from an uploaded document."""

    session_id: str
    summary: str
