import logging
from html import escape

from aiogram import Router, types
from aiogram.filters import Command, CommandObject, CommandStart

from core.errors import EngineError
from handlers.common import format_result, parse_id, reply_error
from services.battle_service import battle_service
from services.goal_service import goal_service
from services.profile_service import profile_service
from services.quest_service import quest_service
from services.streak_service import streak_service

router = Router()

USAGE_ADD_QUEST = "Usage: /add_quest <S|A|B|C|D> <daily|weekly|monthly> <title>"
USAGE_ADD_BATTLE = "Usage: /add_battle <S|A|B|C|D> <gold> <name>"


@router.message(CommandStart())
async def start_command(message: types.Message):
    logging.info(f"🚀 /start from user_id={message.from_user.id}")
    await message.answer(
        "⚔️ Welcome, hunter!\n\n"
        "Complete quests and battles to earn EXP, HP and gold.\n"
        "/profile: your stats and inventory, /rename: change your name\n"
        "/add_quest, /complete_quest, /fail_quest\n"
        "/add_battle, /complete_battle\n"
        "/buy, /redeem, /badges"
    )


@router.message(Command("profile"))
async def show_profile(message: types.Message):
    try:
        text = await profile_service.build_profile_text(message.from_user.id)
    except EngineError as exc:
        await reply_error(message, exc)
        return
    await message.answer(text, parse_mode="HTML")


@router.message(Command("rename"))
async def rename_profile(message: types.Message, command: CommandObject):
    if not command.args or not command.args.strip():
        await message.answer("Usage: /rename <name>")
        return

    try:
        profile = await profile_service.rename_profile(message.from_user.id, command.args)
    except EngineError as exc:
        await reply_error(message, exc)
        return
    await message.answer(f"🪪 Hunter name set to <b>{escape(profile.name)}</b>", parse_mode="HTML")


@router.message(Command("tick"))
async def tick_streak(message: types.Message):
    try:
        profile = await streak_service.tick(message.from_user.id)
    except EngineError as exc:
        await reply_error(message, exc)
        return
    await message.answer(f"🔥 Streak: {profile.streak} | 📈 {profile.progress_percentage:.0f}%")


# -------------------------------
# ➕ Creation
# -------------------------------
@router.message(Command("add_quest"))
async def add_quest(message: types.Message, command: CommandObject):
    parts = (command.args or "").split(maxsplit=2)
    if len(parts) < 3:
        await message.answer(USAGE_ADD_QUEST)
        return

    rank, quest_type, title = parts
    try:
        quest = await quest_service.add_quest(message.from_user.id, title, quest_type, rank)
    except EngineError as exc:
        await reply_error(message, exc)
        return

    await message.answer(
        f"📜 Quest #{quest.id} <b>{escape(quest.title)}</b> [{quest.difficulty}, {quest.quest_type}]\n"
        f"+{quest.exp_reward} EXP, {quest.hp_reward:+} HP",
        parse_mode="HTML",
    )


@router.message(Command("add_battle"))
async def add_battle(message: types.Message, command: CommandObject):
    parts = (command.args or "").split(maxsplit=2)
    if len(parts) < 3 or not parts[1].isdigit():
        await message.answer(USAGE_ADD_BATTLE)
        return

    rank, gold, name = parts
    try:
        battle = await battle_service.add_battle(message.from_user.id, name, rank, gold=int(gold))
    except EngineError as exc:
        await reply_error(message, exc)
        return

    await message.answer(f"🐉 Boss battle #{battle.id} <b>{escape(battle.name)}</b> for {battle.gold} gold", parse_mode="HTML")


# -------------------------------
# ✅ Transitions
# -------------------------------
# command -> (service call, success title)
TRANSITIONS = {
    "complete_quest": (quest_service.complete_quest, "✅ Quest completed!"),
    "undo_quest": (quest_service.uncomplete_quest, "↩️ Quest uncompleted"),
    "fail_quest": (quest_service.fail_quest, "❌ Penalty applied"),
    "complete_battle": (battle_service.complete_battle, "🥊 Boss defeated!"),
    "undo_battle": (battle_service.uncomplete_battle, "↩️ Battle uncompleted"),
    "complete_goal": (goal_service.complete_goal, "🎯 Goal completed!"),
    "undo_goal": (goal_service.uncomplete_goal, "↩️ Goal uncompleted"),
}


@router.message(Command(*TRANSITIONS))
async def apply_transition(message: types.Message, command: CommandObject):
    entity_id = parse_id(command)
    if entity_id is None:
        await message.answer(f"Usage: /{command.command} <id>")
        return

    operation, title = TRANSITIONS[command.command]
    try:
        result = await operation(message.from_user.id, entity_id)
    except EngineError as exc:
        await reply_error(message, exc)
        return

    await message.answer(format_result(title, result))
