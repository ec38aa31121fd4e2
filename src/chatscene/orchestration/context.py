"""Per-update context: typed session + inbound update + dirty tracking."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic

from chatscene.domain.session import (
    DataT,
    ErasedSession,
    Session,
    from_erased,
    to_erased,
    zero_value,
)
from chatscene.domain.update import Update, identity_of

if TYPE_CHECKING:
    from chatscene.orchestration.scenario import Scenario


class Context(Generic[DataT]):
    """
    Facade handed to scene hooks for one update.

    Any mutation of the session (data, step or scene name) marks the context
    dirty and drops the cached erased form in the same call. The dispatcher
    persists after a handled update only when the context is dirty.
    """

    def __init__(
        self,
        scenario: Scenario,
        update: Update,
        session: Session[Any] | None = None,
        data_type: Any = None,
    ) -> None:
        chat_id, user_id = identity_of(update)
        # The caller's session only provides scene/step scaffolding.
        session = session.model_copy() if session is not None else Session(data=None)
        session.chat_id = chat_id
        session.user_id = user_id
        session.data = zero_value(data_type)

        self.scenario = scenario
        self.update = update
        self.data_type = data_type
        self._session = session
        self._chat_id = chat_id
        self._user_id = user_id
        self._dirty = False
        self._cached_erased: ErasedSession | None = None

    def __repr__(self) -> str:
        return (
            f"Context(chat_id={self._chat_id}, user_id={self._user_id}, "
            f"scene={self._session.scene!r}, step={self._session.step}, dirty={self._dirty})"
        )

    # --- identity ---

    @property
    def chat_id(self) -> int:
        return self._chat_id

    @property
    def user_id(self) -> int:
        return self._user_id

    # --- session state ---

    @property
    def session(self) -> Session[DataT]:
        """Current typed session. Mutate it through data/step/scene."""
        return self._session

    @property
    def data(self) -> DataT:
        return self._session.data

    @data.setter
    def data(self, value: DataT) -> None:
        self._session.data = value
        self.mark_dirty()

    @property
    def step(self) -> int:
        return self._session.step

    @step.setter
    def step(self, value: int) -> None:
        self._session.step = value
        self.mark_dirty()

    @property
    def scene(self) -> str:
        return self._session.scene

    @scene.setter
    def scene(self, value: str) -> None:
        self._session.scene = value
        self.mark_dirty()

    # --- dirty tracking ---

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self) -> None:
        """Flag a pending write. Call after mutating data in place."""
        self._dirty = True
        self._cached_erased = None

    def clear_dirty(self) -> None:
        self._dirty = False

    def get_erased(self) -> ErasedSession:
        """Erased form of the session, recomputed only after a mutation."""
        if self._cached_erased is not None and not self._dirty:
            return self._cached_erased
        erased = to_erased(self._session, self.data_type)
        self._cached_erased = erased
        return erased

    def set_erased(self, erased: ErasedSession) -> None:
        """
        Rebase onto a persisted erased form: decode it, cache it and clear
        dirty, so later checks only see changes made after this call.
        Identity always stays the one taken from the update.
        """
        if (erased.chat_id, erased.user_id) != (self._chat_id, self._user_id):
            erased = erased.model_copy(update={"chat_id": self._chat_id, "user_id": self._user_id})
        self._session = from_erased(erased, self.data_type)
        self._cached_erased = erased
        self._dirty = False

    # --- transport ---

    @property
    def text(self) -> str | None:
        return self.update.text

    async def reply(self, text: str) -> None:
        await self.update.reply(text)

    # --- scene transitions ---

    async def enter(self, scene: str) -> None:
        await self.scenario.enter(self, scene)

    async def reenter(self) -> None:
        await self.scenario.reenter(self)

    async def leave(self) -> None:
        await self.scenario.leave(self)
