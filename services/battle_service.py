# services/battle_service.py

import logging

from badges import badge_service
from core.errors import NotFoundError, ValidationError
from core.models import BattlePatch, BossBattle, EventResult
from core.rewards import normalize_rank, resolve_reward
from repositories import category_repository as category_repo
from repositories import completion_repository as completion_repo
from repositories import activity_repository as activity_repo
from services import ledger
from services.ledger import ledger_transaction, read_connection


class BattleService:

    async def add_battle(
        self,
        user_id: int,
        name: str,
        difficulty: str,
        gold: int = 0,
        battle_date=None,
        category_id: int = None
    ) -> BossBattle:
        if not name or not name.strip():
            raise ValidationError("Battle name is required")

        reward = resolve_reward(difficulty, gold=gold)

        async with read_connection("BATTLE-ADD") as conn:
            if category_id is not None and not await category_repo.get_category(conn, user_id, category_id):
                raise NotFoundError("Category", category_id)

            row = await activity_repo.insert_battle(
                conn, user_id, name.strip(), reward.rank, reward.gold, battle_date, category_id
            )

        battle = BossBattle.from_row(row)
        logging.info(f"➕ [BATTLE-ADD] user={user_id} battle={battle.id} {battle.difficulty} gold={battle.gold}")
        return battle

    async def edit_battle(self, user_id: int, battle_id: int, patch: BattlePatch) -> BossBattle:
        changes = patch.changes()

        if "difficulty" in changes:
            changes["difficulty"] = normalize_rank(changes["difficulty"])
        if "gold" in changes and changes["gold"] < 0:
            raise ValidationError(f"Gold reward cannot be negative: {changes['gold']}")
        if "name" in changes and not changes["name"].strip():
            raise ValidationError("Battle name cannot be empty")

        async with read_connection("BATTLE-EDIT") as conn:
            category_id = changes.get("status_category_id")
            if category_id is not None and not await category_repo.get_category(conn, user_id, category_id):
                raise NotFoundError("Category", category_id)

            row = await completion_repo.update_fields(conn, "boss_battles", user_id, battle_id, changes)

        if row is None:
            raise NotFoundError("Battle", battle_id)
        return BossBattle.from_row(row)

    async def list_battles(self, user_id: int):
        async with read_connection("BATTLE-LIST") as conn:
            rows = await activity_repo.list_battles(conn, user_id)
        return [BossBattle.from_row(r) for r in rows]

    # -----------------------------------------
    # 🥊 CompleteBattle: credits gold_earned
    # -----------------------------------------
    async def complete_battle(self, user_id: int, battle_id: int) -> EventResult:
        async with ledger_transaction(user_id, "BATTLE-COMPLETE") as ctx:
            battle = BossBattle.from_row(
                await ledger.complete_entity(ctx, "boss_battles", "Battle", battle_id)
            )
            profile = await ledger.grant_gold(ctx, battle.gold)

        logging.info(
            f"🥊 [BATTLE-COMPLETE] user={user_id} battle={battle_id} +{battle.gold} gold "
            f"(earned={profile.gold_earned}, spendable={profile.spendable_gold})"
        )

        badges = await badge_service.evaluate_after_commit(user_id)
        return EventResult(profile=profile, awarded_badges=badges)

    async def uncomplete_battle(self, user_id: int, battle_id: int) -> EventResult:
        async with ledger_transaction(user_id, "BATTLE-UNCOMPLETE") as ctx:
            await ledger.uncomplete_entity(ctx, "boss_battles", "Battle", battle_id)
            profile = ctx.profile

        logging.info(f"↩️ [BATTLE-UNCOMPLETE] user={user_id} battle={battle_id}")
        return EventResult(profile=profile)


battle_service = BattleService()
