# models.py
# Data contracts for the bug-report interview.
# No business logic lives here, only schema and ordering.

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


ROLE_LABELS = {
    Role.USER: "User",
    Role.ASSISTANT: "Bug Butler",
    Role.SYSTEM: "System",
}


class Phase(str, Enum):
    COLLECTING = "collecting"
    READY_TO_FINALIZE = "ready_to_finalize"


class Turn(BaseModel):
    """One labelled message in the conversation. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = Field(..., description="Message text as shown to the user.")
    failed: bool = Field(default=False, description="True for synthetic turns reporting a failed call.")

    @property
    def label(self) -> str:
        return ROLE_LABELS[self.role]

    def as_message(self) -> dict[str, str]:
        """Chat-completion wire shape: {"role", "content"}."""
        return {"role": self.role.value, "content": self.content}


class Transcript:
    """
    Ordered, append-only history of Turns.

    Insertion order is replayed verbatim to the completion service, so
    there is no way to edit, remove, or reorder a Turn once appended.
    """

    def __init__(self, turns: list[Turn] | None = None) -> None:
        self._turns: list[Turn] = list(turns or [])

    @classmethod
    def seeded(cls, greeting: str) -> "Transcript":
        return cls([Turn(role=Role.ASSISTANT, content=greeting)])

    def append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        return turn

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def user_turn_count(self) -> int:
        return sum(1 for turn in self._turns if turn.role is Role.USER)

    def as_messages(self) -> list[dict[str, str]]:
        return [turn.as_message() for turn in self._turns]

    def serialize(self) -> str:
        """Render as "{Role}: {content}" blocks separated by blank lines, in order."""
        return "\n\n".join(f"{turn.label}: {turn.content}" for turn in self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self._turns)
