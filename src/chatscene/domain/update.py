"""Transport contract: the three capabilities the engine needs from an inbound update."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Update(Protocol):
    """One inbound update from any chat transport."""

    @property
    def sender_id(self) -> int:
        """Identity of the user who sent the update."""
        ...

    @property
    def chat_id(self) -> int | None:
        """Identity of the chat, or None when the update carries no message."""
        ...

    @property
    def text(self) -> str | None:
        """Free-form text of the update, if any."""
        ...

    async def reply(self, text: str) -> None:
        """Send a reply into the same chat."""
        ...


def identity_of(update: Update) -> tuple[int, int]:
    """(chat_id, user_id) for an update; chat_id defaults to 0."""
    chat_id = update.chat_id
    return (chat_id if chat_id is not None else 0), update.sender_id
