"""Chat message model shared by the engine, channel, and transcript."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import time
from typing import Any
from uuid import uuid4


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Message:
    """A single immutable chat message."""

    id: str
    role: Role
    content: str
    timestamp: float

    @classmethod
    def create(cls, role: Role | str, content: str) -> Message:
        """Build a message with a fresh id and the current timestamp."""
        return cls(
            id=uuid4().hex,
            role=Role(role),
            content=content,
            timestamp=time.time(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp,
        }
