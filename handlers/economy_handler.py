import logging
from html import escape

from aiogram import Router, types
from aiogram.filters import Command, CommandObject

from badges import badge_service
from core.errors import EngineError
from handlers.common import format_result, parse_id, reply_error
from services.economy_service import economy_service

router = Router()

USAGE_ADD_ITEM = "Usage: /add_item <shop|reward> <price> <required level> <name>"


@router.message(Command("add_item"))
async def add_item(message: types.Message, command: CommandObject):
    parts = (command.args or "").split(maxsplit=3)
    if len(parts) < 4 or not parts[1].isdigit() or not parts[2].isdigit():
        await message.answer(USAGE_ADD_ITEM)
        return

    item_type, price, level, name = parts
    try:
        item = await economy_service.add_item(message.from_user.id, name, item_type, int(price), int(level))
    except EngineError as exc:
        await reply_error(message, exc)
        return

    cost = f"{item.price} gold" if item.item_type == "shop" else f"{item.price} HP"
    await message.answer(
        f"🛒 Item #{item.id} <b>{escape(item.name)}</b>: {cost}, Lv. {item.required_level}",
        parse_mode="HTML",
    )


@router.message(Command("buy"))
async def buy_item(message: types.Message, command: CommandObject):
    item_id = parse_id(command)
    if item_id is None:
        await message.answer("Usage: /buy <item id>")
        return

    try:
        result = await economy_service.purchase_shop_item(message.from_user.id, item_id)
    except EngineError as exc:
        await reply_error(message, exc)
        return

    await message.answer(format_result("💰 Purchased!", result))


@router.message(Command("redeem"))
async def redeem_reward(message: types.Message, command: CommandObject):
    item_id = parse_id(command)
    if item_id is None:
        await message.answer("Usage: /redeem <reward id>")
        return

    try:
        result = await economy_service.redeem_reward(message.from_user.id, item_id)
    except EngineError as exc:
        await reply_error(message, exc)
        return

    await message.answer(format_result("❤️ Reward redeemed!", result))


# -------------------------------
# 🏅 Badges
# -------------------------------
@router.message(Command("badges"))
async def show_badges(message: types.Message):
    user_id = message.from_user.id
    try:
        awarded = await badge_service.evaluate(user_id)
        collection = await badge_service.get_collection(user_id)
    except EngineError as exc:
        await reply_error(message, exc)
        return

    logging.info(f"[BADGES] user={user_id} opened badge collection, {len(awarded)} newly awarded")

    earned_ids = {b.id for b in collection["earned"]}
    lines = [f"🏆 Earned {len(earned_ids)} out of {len(collection['all'])} badges"]
    for badge in collection["all"]:
        mark = "🏅" if badge.id in earned_ids else "▫️"
        requirement = (
            f" ({badge.criteria.threshold:g} {badge.criteria.kind.value})" if badge.criteria else " (manual)"
        )
        lines.append(f"{mark} #{badge.id} {escape(badge.name)}{requirement}")

    await message.answer("\n".join(lines), parse_mode="HTML")


@router.message(Command("award_badge"))
async def award_badge(message: types.Message, command: CommandObject):
    badge_id = parse_id(command)
    if badge_id is None:
        await message.answer("Usage: /award_badge <badge id>")
        return

    try:
        badge = await badge_service.award(message.from_user.id, badge_id)
    except EngineError as exc:
        await reply_error(message, exc)
        return

    await message.answer(f"🏅 Badge earned: <b>{escape(badge.name)}</b>", parse_mode="HTML")
