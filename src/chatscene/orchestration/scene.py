"""Scene contract and a typed base class for application scenes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Protocol, runtime_checkable

from chatscene.domain.errors import SceneTypeMismatchError
from chatscene.domain.session import DataT, ErasedSession, is_untyped
from chatscene.domain.update import Update
from chatscene.orchestration.context import Context

if TYPE_CHECKING:
    from chatscene.orchestration.scenario import Scenario


@runtime_checkable
class Scene(Protocol):
    """Named unit of conversational behavior with entry/update/exit hooks."""

    @property
    def name(self) -> str:
        ...

    async def enter(self, ctx: Context[Any]) -> None:
        ...

    async def on_update(self, ctx: Context[Any]) -> None:
        ...

    async def leave(self, ctx: Context[Any]) -> None:
        ...


@runtime_checkable
class TypedScene(Scene, Protocol):
    """Scene that builds its own correctly-typed context."""

    def new_context(self, scenario: Scenario, update: Update, erased: ErasedSession) -> Context[Any]:
        ...


def build_context(scene: Scene, scenario: Scenario, update: Update, erased: ErasedSession) -> Context[Any]:
    """Context for scene: via its own factory, else an untyped one."""
    if isinstance(scene, TypedScene):
        return scene.new_context(scenario, update, erased)
    ctx: Context[Any] = Context(scenario, update)
    ctx.set_erased(erased)
    return ctx


class BaseScene(Generic[DataT]):
    """
    Base for scenes whose session data has a concrete type.

    Subclasses set `data_type` (a pydantic model, dataclass or any type
    pydantic can encode and construct with no arguments) and override the
    hooks they need. Hooks should go through `typed(ctx)` so a context built
    for another data type fails fast instead of being coerced.
    """

    data_type: Any = dict

    def __init__(self, name: str, data_type: Any = None) -> None:
        self._name = name
        if data_type is not None:
            self.data_type = data_type

    @property
    def name(self) -> str:
        return self._name

    def new_context(self, scenario: Scenario, update: Update, erased: ErasedSession) -> Context[DataT]:
        ctx: Context[DataT] = Context(scenario, update, data_type=self.data_type)
        ctx.set_erased(erased)
        return ctx

    def typed(self, ctx: Context[Any]) -> Context[DataT]:
        if ctx.data_type is self.data_type:
            return ctx
        if is_untyped(ctx.data_type) and is_untyped(self.data_type):
            return ctx
        raise SceneTypeMismatchError(
            f"scene {self._name!r} expects data of type {_type_name(self.data_type)}, "
            f"got context for {_type_name(ctx.data_type)}"
        )

    async def enter(self, ctx: Context[Any]) -> None:
        self.typed(ctx)

    async def on_update(self, ctx: Context[Any]) -> None:
        self.typed(ctx)

    async def leave(self, ctx: Context[Any]) -> None:
        self.typed(ctx)


def _type_name(data_type: Any) -> str:
    if is_untyped(data_type):
        return "dict"
    return getattr(data_type, "__name__", repr(data_type))
