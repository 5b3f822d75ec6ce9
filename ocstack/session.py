"""Chat sessions: the active profile, model, history and tools."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Message:
    """One entry of a session history; ``text`` holds any payload."""

    role: str
    text: Any = None


@dataclass
class History:
    """The ordered list of messages exchanged in a session."""

    messages: list[Message] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)


@dataclass
class Session:
    """State kept across the turns of one conversation."""

    profile: str = ""
    model: str = ""
    history: History = field(default_factory=History)
    tools: bytes = b"[]"
    debug: bool = False

    def update_history(self, message: Message) -> None:
        """Append a message to the history."""
        self.history.messages.append(message)

    def update_context(self) -> None:
        """Record the current profile as a system message."""
        self.update_history(Message(role="system", text=self.profile))

    def save_session(self) -> Session:
        """Return an in-memory snapshot of the session; nothing is written out."""
        return copy.deepcopy(self)

    def load_session(self) -> Session:
        """Return a blank session, as no sessions are persisted."""
        return Session()


def new_session(
    model: str,
    profile: str,
    history: History | None = None,
    tools: bytes = b"[]",
    debug: bool = False,
) -> Session:
    """Create a session for the given model, profile, history and tools."""
    return Session(
        profile=profile,
        model=model,
        history=history if history is not None else History(),
        tools=tools,
        debug=debug,
    )