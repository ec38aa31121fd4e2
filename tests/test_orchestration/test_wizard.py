"""Wizard: cursor advancement, completion, cancellation, type checks."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from conftest import FakeUpdate, Profile, RecordingStore
from chatscene.config.models import WizardConfig
from chatscene.domain.errors import SceneTypeMismatchError
from chatscene.domain.session import ErasedSession, Session
from chatscene.orchestration.context import Context
from chatscene.orchestration.scenario import Scenario
from chatscene.orchestration.wizard import FINISHED_STEP, Wizard


async def advance(ctx: Context[Any]) -> bool:
    return True


async def stay(ctx: Context[Any]) -> bool:
    return False


def _ctx(scenario: Scenario, step: int, scene: str = "wiz", text: str = "hello") -> Context[Profile]:
    ctx: Context[Profile] = Context(scenario, FakeUpdate(text=text), data_type=Profile)
    ctx.set_erased(ErasedSession(chat_id=2, user_id=1, scene=scene, step=step))
    return ctx


def test_name_and_length() -> None:
    wizard = Wizard("wiz", advance, stay, data_type=Profile)
    assert wizard.name == "wiz"
    assert len(wizard) == 2


def test_enter_sets_step_zero_and_marks_dirty() -> None:
    scenario = Scenario()
    wizard = Wizard("wiz", advance, data_type=Profile)
    ctx: Context[Profile] = Context(scenario, FakeUpdate(), Session(step=-1, data=None), data_type=Profile)

    asyncio.run(wizard.enter(ctx))

    assert ctx.step == 0
    assert ctx.is_dirty is True


def test_leave_sets_finished_sentinel() -> None:
    wizard = Wizard("wiz", advance, data_type=Profile)
    ctx = _ctx(Scenario(), step=0)
    asyncio.run(wizard.leave(ctx))
    assert ctx.step == FINISHED_STEP
    assert ctx.is_dirty is True


def test_advancing_step_moves_cursor(recording_store: RecordingStore) -> None:
    scenario = Scenario(recording_store)
    wizard = Wizard("wiz", advance, stay, data_type=Profile)
    scenario.register(wizard)
    ctx = _ctx(scenario, step=0)

    asyncio.run(wizard.on_update(ctx))
    assert ctx.step == 1
    assert ctx.is_dirty is True

    ctx.clear_dirty()
    asyncio.run(wizard.on_update(ctx))
    assert ctx.step == 1
    assert ctx.scene == "wiz"
    assert ctx.is_dirty is False
    assert recording_store.writes == []


def test_non_advancing_step_keeps_cursor_but_data_mutation_is_dirty() -> None:
    async def edit(ctx: Context[Profile]) -> bool:
        ctx.data = Profile(name="Ann")
        return False

    wizard = Wizard("wiz", edit, advance, data_type=Profile)
    ctx = _ctx(Scenario(), step=0)

    asyncio.run(wizard.on_update(ctx))

    assert ctx.step == 0
    assert ctx.is_dirty is True
    assert ctx.data.name == "Ann"


def test_last_step_advance_leaves_scene(recording_store: RecordingStore) -> None:
    scenario = Scenario(recording_store)
    wizard = Wizard("wiz", advance, data_type=Profile)
    scenario.register(wizard)
    ctx = _ctx(scenario, step=0)

    asyncio.run(wizard.on_update(ctx))

    assert ctx.scene == ""
    assert ctx.step == FINISHED_STEP
    assert recording_store.writes[-1].scene == ""
    assert recording_store.writes[-1].step == FINISHED_STEP


@pytest.mark.parametrize("step", [-1, 2, 10])
def test_out_of_range_cursor_leaves(step: int, recording_store: RecordingStore) -> None:
    called: list[int] = []

    async def track(ctx: Context[Any]) -> bool:
        called.append(ctx.step)
        return False

    scenario = Scenario(recording_store)
    wizard = Wizard("wiz", track, track, data_type=Profile)
    scenario.register(wizard)
    ctx = _ctx(scenario, step=step)

    asyncio.run(wizard.on_update(ctx))

    assert called == []
    assert ctx.scene == ""
    assert ctx.step == FINISHED_STEP


@pytest.mark.parametrize("step", [0, 1])
@pytest.mark.parametrize("text", ["/cancel", "/CANCEL", "  /Cancel "])
def test_cancel_replies_once_and_leaves(step: int, text: str, recording_store: RecordingStore) -> None:
    called: list[int] = []

    async def track(ctx: Context[Any]) -> bool:
        called.append(ctx.step)
        return True

    scenario = Scenario(recording_store)
    wizard = Wizard("wiz", track, track, data_type=Profile)
    scenario.register(wizard)
    ctx = _ctx(scenario, step=step, text=text)

    asyncio.run(wizard.on_update(ctx))

    assert ctx.update.replies == ["Cancelled."]
    assert called == []
    assert ctx.scene == ""
    assert ctx.step == FINISHED_STEP


def test_cancel_text_from_config(recording_store: RecordingStore) -> None:
    scenario = Scenario(recording_store)
    wizard = Wizard.from_config("wiz", [advance], WizardConfig(cancel_command="/stop", cancel_reply="Stopped"), data_type=Profile)
    scenario.register(wizard)
    ctx = _ctx(scenario, step=0, text="/stop")

    asyncio.run(wizard.on_update(ctx))

    assert ctx.update.replies == ["Stopped"]
    assert ctx.scene == ""


def test_step_error_propagates_without_advancing() -> None:
    async def fail(ctx: Context[Any]) -> bool:
        raise ValueError("bad input")

    wizard = Wizard("wiz", fail, advance, data_type=Profile)
    ctx = _ctx(Scenario(), step=0)

    with pytest.raises(ValueError, match="bad input"):
        asyncio.run(wizard.on_update(ctx))
    assert ctx.step == 0
    assert ctx.is_dirty is False


def test_mismatched_context_type_fails_fast() -> None:
    wizard = Wizard("wiz", advance, data_type=Profile)
    ctx: Context[Any] = Context(Scenario(), FakeUpdate())
    with pytest.raises(SceneTypeMismatchError):
        asyncio.run(wizard.on_update(ctx))


def test_untyped_wizard_accepts_untyped_context() -> None:
    wizard = Wizard("wiz", advance, stay)
    ctx: Context[Any] = Context(Scenario(), FakeUpdate())
    asyncio.run(wizard.on_update(ctx))
    assert ctx.step == 1


def test_full_wizard_through_dispatcher(recording_store: RecordingStore) -> None:
    async def ask_name(ctx: Context[Profile]) -> bool:
        text = ctx.text or ""
        if text.startswith("/"):
            await ctx.reply("name?")
            return False
        ctx.data = Profile(name=text)
        await ctx.reply("age?")
        return True

    async def ask_age(ctx: Context[Profile]) -> bool:
        ctx.data = ctx.data.model_copy(update={"age": int(ctx.text or 0)})
        await ctx.reply("done")
        return True

    scenario = Scenario(recording_store).register(Wizard("wiz", ask_name, ask_age, data_type=Profile))

    async def run() -> None:
        start = FakeUpdate(text="/start")
        await scenario.start(start, "wiz")
        assert start.replies == ["name?"]

        name = FakeUpdate(text="Ann")
        await scenario.handle_update(name)
        assert name.replies == ["age?"]

        age = FakeUpdate(text="30")
        await scenario.handle_update(age)
        assert age.replies == ["done"]

        ctx = await scenario.new_context(FakeUpdate(), Profile)
        assert ctx.scene == ""
        assert ctx.step == FINISHED_STEP
        assert ctx.data == Profile(name="Ann", age=30)

    asyncio.run(run())
