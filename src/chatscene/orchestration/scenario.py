"""Scenario dispatcher: routes updates to the active scene and persists sessions."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from chatscene.config.models import ScenarioConfig
from chatscene.domain.errors import SceneNotFoundError, SessionNotFoundError, StoreError
from chatscene.domain.session import ErasedSession
from chatscene.domain.update import Update, identity_of
from chatscene.infrastructure.session_store import InMemorySessionStore, SessionStore
from chatscene.observability.logging import get_logger
from chatscene.orchestration.context import Context
from chatscene.orchestration.scene import Scene, build_context

NextHandler = Callable[[Update], Awaitable[Any]]

T = TypeVar("T")

logger = get_logger(__name__)


class Scenario:
    """
    Owns the scene registry and the session store.

    Register scenes at startup; afterwards the registry is only read, so one
    Scenario can serve concurrent updates.
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        config: ScenarioConfig | None = None,
    ) -> None:
        self.config = config or ScenarioConfig()
        self._store: SessionStore = store if store is not None else InMemorySessionStore()
        self._scenes: dict[str, Scene] = {}

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def scenes(self) -> Mapping[str, Scene]:
        return MappingProxyType(self._scenes)

    def register(self, scene: Scene) -> Scenario:
        """Add or replace a scene under its name. Returns self for chaining."""
        self._scenes[scene.name] = scene
        return self

    def get_scene(self, name: str) -> Scene | None:
        if not name:
            return None
        return self._scenes.get(name)

    # --- store access ---

    async def _with_timeout(self, operation: str, aw: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(aw, timeout=self.config.store_timeout_seconds)
        except SessionNotFoundError:
            raise
        except asyncio.TimeoutError as e:
            raise StoreError(f"{operation}: timed out after {self.config.store_timeout_seconds}s") from e
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"{operation}: {e}") from e

    async def _load(self, chat_id: int, user_id: int) -> ErasedSession:
        try:
            return await self._with_timeout("store.get", self._store.get(chat_id, user_id))
        except SessionNotFoundError:
            return ErasedSession(chat_id=chat_id, user_id=user_id)

    async def _load_or_empty(self, update: Update) -> ErasedSession:
        """Load for application-side handlers; a store failure degrades to an empty session."""
        chat_id, user_id = identity_of(update)
        try:
            return await self._load(chat_id, user_id)
        except StoreError as e:
            logger.error("failed to load session", chat_id=chat_id, user_id=user_id, error=str(e))
            return ErasedSession(chat_id=chat_id, user_id=user_id)

    async def _run_hook(self, operation: str, scene: Scene, aw: Awaitable[None]) -> None:
        try:
            await aw
        except Exception as e:
            e.add_note(f"{operation}: scene {scene.name!r}")
            raise

    async def _persist(self, ctx: Context[Any], operation: str) -> None:
        erased = ctx.get_erased()
        await self._with_timeout(operation, self._store.set(erased))
        # get_erased() cached exactly what was written
        ctx.clear_dirty()
        logger.debug(
            "session persisted",
            operation=operation,
            chat_id=ctx.chat_id,
            user_id=ctx.user_id,
            scene=erased.scene,
            step=erased.step,
        )

    # --- entry points ---

    async def handle_update(self, update: Update, next_handler: NextHandler | None = None) -> None:
        """
        Dispatch one update to the active scene, or to next_handler when the
        slot has no active (registered) scene. Writes only if the scene
        mutated the session.
        """
        chat_id, user_id = identity_of(update)
        erased = await self._load(chat_id, user_id)

        scene = self.get_scene(erased.scene)
        if scene is None:
            if erased.scene:
                logger.warning(
                    "active scene is not registered",
                    chat_id=chat_id,
                    user_id=user_id,
                    scene=erased.scene,
                )
            if next_handler is not None:
                await next_handler(update)
            return

        log = logger.bind(chat_id=chat_id, user_id=user_id, scene=scene.name)
        ctx = build_context(scene, self, update, erased)
        log.debug("dispatching update", step=ctx.step)
        await self._run_hook("scene.on_update", scene, scene.on_update(ctx))

        if ctx.is_dirty:
            await self._persist(ctx, "store.set(update)")

    def middleware(self, next_handler: NextHandler) -> Callable[[Update], Awaitable[None]]:
        """Wrap next_handler so scene dispatch runs ahead of it."""

        async def handler(update: Update) -> None:
            await self.handle_update(update, next_handler)

        return handler

    async def new_context(self, update: Update, data_type: Any = None) -> Context[Any]:
        """
        Context for handlers running outside an active scene (e.g. a command
        that enters one). A failed store read degrades to an empty session.
        """
        erased = await self._load_or_empty(update)
        ctx: Context[Any] = Context(self, update, data_type=data_type)
        ctx.set_erased(erased)
        return ctx

    async def start(self, update: Update, name: str) -> Context[Any] | None:
        """
        Enter scene `name` with a context built by the scene itself.
        Unknown names are ignored like in enter(); returns the context used.
        """
        scene = self.get_scene(name)
        if scene is None:
            return None
        erased = await self._load_or_empty(update)
        ctx = build_context(scene, self, update, erased)
        await self.enter(ctx, name)
        return ctx

    # --- transitions ---

    async def enter(self, ctx: Context[Any], name: str) -> None:
        """
        Make `name` the active scene: run its enter hook, persist, then run
        on_update once so the scene can send its first prompt.
        Entering an unregistered scene is a no-op.
        """
        scene = self.get_scene(name)
        if scene is None:
            logger.debug("enter ignored, scene not registered", chat_id=ctx.chat_id, user_id=ctx.user_id, scene=name)
            return

        await self._run_hook("scene.enter", scene, scene.enter(ctx))

        erased = ctx.get_erased().model_copy(update={"scene": name})
        await self._with_timeout("store.set(enter)", self._store.set(erased))
        ctx.set_erased(erased)
        logger.debug("scene entered", chat_id=ctx.chat_id, user_id=ctx.user_id, scene=name, step=erased.step)

        await self._run_hook("scene.on_update", scene, scene.on_update(ctx))

        if ctx.is_dirty:
            await self._persist(ctx, "store.set(enter.update)")

    async def reenter(self, ctx: Context[Any]) -> None:
        await self.enter(ctx, ctx.scene)

    async def leave(self, ctx: Context[Any]) -> None:
        """
        Run the active scene's leave hook and clear the scene name.
        Raises SceneNotFoundError if the current scene is not registered.
        """
        name = ctx.scene
        scene = self.get_scene(name)
        if scene is None:
            raise SceneNotFoundError(f"leave: scene {name!r} is not registered")

        await self._run_hook("scene.leave", scene, scene.leave(ctx))

        erased = ctx.get_erased().model_copy(update={"scene": ""})
        await self._with_timeout("store.set(leave)", self._store.set(erased))
        ctx.set_erased(erased)
        logger.debug("scene left", chat_id=ctx.chat_id, user_id=ctx.user_id, scene=name, step=erased.step)
