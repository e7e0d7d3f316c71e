from html import escape

from aiogram import types
from aiogram.filters import CommandObject

from core.errors import EngineError
from core.models import EventResult


def parse_id(command: CommandObject):
    """First command argument as an integer id, or None."""
    if not command.args:
        return None
    first = command.args.split()[0]
    return int(first) if first.isdigit() else None


def format_result(title: str, result: EventResult) -> str:
    p = result.profile
    lines = [
        f"{title}",
        f"⭐ Lv. {p.level} | ✨ {p.exp}/{p.exp_needed} EXP | ❤️ {p.hp} HP | 💰 {p.spendable_gold} gold",
    ]

    if result.category is not None:
        c = result.category
        lines.append(f"🗂 {c.name}: Lv. {c.level} ({c.exp}/{c.exp_needed} EXP)")

    for badge in result.awarded_badges:
        lines.append(f"🏅 Badge earned: {badge.name}")

    return "\n".join(lines)


async def reply_error(message: types.Message, exc: EngineError):
    await message.answer(f"⚠️ {escape(exc.message)}\n<code>{exc.kind}</code>", parse_mode="HTML")
