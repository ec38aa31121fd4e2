"""Console transport: updates typed at a terminal, replies printed back."""

from __future__ import annotations

from collections.abc import Callable


class ConsoleUpdate:
    """Implements the Update protocol for one line of console input."""

    def __init__(
        self,
        text: str,
        sender_id: int,
        chat_id: int | None = None,
        output: Callable[[str], None] = print,
    ) -> None:
        self._text = text
        self._sender_id = sender_id
        self._chat_id = chat_id
        self._output = output
        self.replies: list[str] = []

    @property
    def sender_id(self) -> int:
        return self._sender_id

    @property
    def chat_id(self) -> int | None:
        return self._chat_id

    @property
    def text(self) -> str | None:
        return self._text

    async def reply(self, text: str) -> None:
        self.replies.append(text)
        self._output(f"Bot: {text}")
