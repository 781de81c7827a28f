from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    role: Role
    content: str


class ConversationState:
    """
    Ordered, append-only log of the turns exchanged during one run.

    The store does not enforce User/Assistant alternation; the session is the
    only writer and appends in the order the turns happen.
    """

    def __init__(self):
        self._turns: List[Turn] = []

    def append_user(self, text: str) -> Turn:
        turn = Turn(Role.USER, text)
        self._turns.append(turn)
        return turn

    def append_assistant(self, text: str) -> Turn:
        turn = Turn(Role.ASSISTANT, text)
        self._turns.append(turn)
        return turn

    @property
    def turns(self) -> Tuple[Turn, ...]:
        """The full ordered sequence, oldest first."""
        return tuple(self._turns)

    def latest_user(self) -> Optional[Turn]:
        for turn in reversed(self._turns):
            if turn.role is Role.USER:
                return turn
        return None

    def __len__(self) -> int:
        return len(self._turns)
