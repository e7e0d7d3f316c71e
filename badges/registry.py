# badges/registry.py

from core.models import CriteriaKind
from repositories import completion_repository as completion_repo


async def _level(ctx):
    return ctx.profile.level


async def _exp(ctx):
    return ctx.profile.exp


async def _gold(ctx):
    return ctx.profile.spendable_gold


async def _quests(ctx):
    return await completion_repo.count_completed(ctx.conn, "quests", ctx.user_id)


async def _battles(ctx):
    return await completion_repo.count_completed(ctx.conn, "boss_battles", ctx.user_id)


# criteria kind -> metric read from an open ledger transaction
METRICS = {
    CriteriaKind.LEVEL: _level,
    CriteriaKind.EXP: _exp,
    CriteriaKind.GOLD: _gold,
    CriteriaKind.QUESTS: _quests,
    CriteriaKind.BATTLES: _battles,
}
