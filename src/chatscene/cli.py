"""Interactive console bot driving a registration wizard through the dispatcher."""

from __future__ import annotations

import argparse
import asyncio
import sys

import yaml

from chatscene.config.loader import load_config
from chatscene.config.models import ScenarioConfig
from chatscene.demo import REGISTRATION_SCENE, RegistrationForm, build_registration_wizard
from chatscene.domain.update import Update
from chatscene.infrastructure.console import ConsoleUpdate
from chatscene.infrastructure.session_store import InMemorySessionStore
from chatscene.observability.logging import configure_logging
from chatscene.orchestration.scenario import Scenario

FALLBACK_HINT = "Send /start to register, /me to see your data."


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="chatscene interactive demo")
    p.add_argument("--config", "-c", default=None, help="Path to scenario YAML config")
    p.add_argument("--chat", type=int, default=1, help="Chat ID")
    p.add_argument("--user", type=int, default=1, help="User ID")
    return p.parse_args()


def build_scenario(config: ScenarioConfig) -> Scenario:
    scenario = Scenario(InMemorySessionStore(), config)
    scenario.register(build_registration_wizard(config.wizard))
    return scenario


async def handle_command(scenario: Scenario, update: Update) -> None:
    """Handlers that run when no scene claims the update."""
    text = (update.text or "").strip()
    if text == "/start":
        await scenario.start(update, REGISTRATION_SCENE)
        return
    if text == "/me":
        ctx = await scenario.new_context(update, RegistrationForm)
        form = ctx.data
        if not form.name:
            await update.reply("You are not registered yet.")
            return
        await update.reply(f"Name: {form.name}, born: {form.birth_date or '-'}")
        return
    await update.reply(FALLBACK_HINT)


async def run_interactive(scenario: Scenario, chat_id: int, user_id: int) -> None:
    async def fallback(update: Update) -> None:
        await handle_command(scenario, update)

    handler = scenario.middleware(fallback)
    print(FALLBACK_HINT)
    print()
    while True:
        try:
            line = input("You: ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line.lower() in ("quit", "exit", "q"):
            print("Goodbye.")
            break
        await handler(ConsoleUpdate(line, sender_id=user_id, chat_id=chat_id))
        print()


def main() -> int:
    args = parse_args()
    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (yaml.YAMLError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(config.logging.level, config.logging.json_output)
    scenario = build_scenario(config)

    asyncio.run(run_interactive(scenario, args.chat, args.user))
    return 0


if __name__ == "__main__":
    sys.exit(main())
