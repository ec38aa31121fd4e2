"""Registration wizard used by the interactive CLI: asks for a name, then a birth date."""

from __future__ import annotations

from pydantic import BaseModel

from chatscene.config.models import WizardConfig
from chatscene.domain.validators import parse_birth_date, validate_birth_date, validate_name
from chatscene.orchestration.context import Context
from chatscene.orchestration.wizard import Wizard

REGISTRATION_SCENE = "user_register_scene"

ASK_NAME = "What is your name?"
ASK_BIRTH_DATE = "When were you born? (e.g. 1990-04-23)"


class RegistrationForm(BaseModel):
    name: str = ""
    birth_date: str = ""


async def ask_name(ctx: Context[RegistrationForm]) -> bool:
    text = (ctx.text or "").strip()
    # First run happens right after enter, on the command that started the wizard.
    if not text or text.startswith("/"):
        await ctx.reply(ASK_NAME)
        return False

    ok, error = validate_name(text)
    if not ok:
        await ctx.reply(f"{error} {ASK_NAME}")
        return False

    ctx.data.name = text
    ctx.mark_dirty()
    await ctx.reply(f"Nice to meet you, {text}. {ASK_BIRTH_DATE}")
    return True


async def ask_birth_date(ctx: Context[RegistrationForm]) -> bool:
    text = (ctx.text or "").strip()
    ok, error = validate_birth_date(text)
    if not ok:
        await ctx.reply(error)
        return False

    parsed = parse_birth_date(text)
    ctx.data.birth_date = parsed.isoformat() if parsed else text
    ctx.mark_dirty()
    await ctx.reply(f"Thanks, {ctx.data.name}! You are registered.")
    return True


def build_registration_wizard(config: WizardConfig | None = None) -> Wizard[RegistrationForm]:
    return Wizard.from_config(
        REGISTRATION_SCENE,
        [ask_name, ask_birth_date],
        config or WizardConfig(),
        data_type=RegistrationForm,
    )
