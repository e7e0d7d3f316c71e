# services/quest_service.py

import logging

from badges import badge_service
from core.errors import NotFoundError, PenaltyNotApplicable, ValidationError
from core.models import PENALTY_QUEST_TYPES, QUEST_TYPES, EventResult, Quest, QuestPatch
from core.rewards import normalize_rank, resolve_reward, reward_for
from repositories import category_repository as category_repo
from repositories import completion_repository as completion_repo
from repositories import activity_repository as activity_repo
from services import ledger
from services.ledger import ledger_transaction, read_connection
from services.streak_service import streak_service


def _quest_type(value: str) -> str:
    quest_type = (value or "").strip().lower()
    if quest_type not in QUEST_TYPES:
        raise ValidationError(f"Unknown quest type: {value!r} (expected daily, weekly or monthly)")
    return quest_type


class QuestService:

    # ================================
    #  ➕ Create / edit
    # ================================
    async def add_quest(
        self,
        user_id: int,
        title: str,
        quest_type: str,
        difficulty: str,
        exp_reward: int = None,
        hp_reward: int = None,
        description: str = None,
        category_id: int = None
    ) -> Quest:
        if not title or not title.strip():
            raise ValidationError("Quest title is required")

        # custom values replace the rank defaults
        reward = resolve_reward(difficulty, exp=exp_reward, hp=hp_reward)
        quest_type = _quest_type(quest_type)

        async with read_connection("QUEST-ADD") as conn:
            if category_id is not None and not await category_repo.get_category(conn, user_id, category_id):
                raise NotFoundError("Category", category_id)

            row = await activity_repo.insert_quest(
                conn, user_id, title.strip(), quest_type, reward.rank,
                reward.exp, reward.hp, description, category_id
            )

        quest = Quest.from_row(row)
        logging.info(
            f"➕ [QUEST-ADD] user={user_id} quest={quest.id} {quest.quest_type}/{quest.difficulty} "
            f"+{quest.exp_reward} EXP {quest.hp_reward:+} HP"
        )
        return quest

    async def edit_quest(self, user_id: int, quest_id: int, patch: QuestPatch) -> Quest:
        changes = patch.changes()

        if "difficulty" in changes:
            changes["difficulty"] = normalize_rank(changes["difficulty"])
        if "quest_type" in changes:
            changes["quest_type"] = _quest_type(changes["quest_type"])
        if "exp_reward" in changes and changes["exp_reward"] < 0:
            raise ValidationError(f"EXP reward cannot be negative: {changes['exp_reward']}")
        if "title" in changes and not changes["title"].strip():
            raise ValidationError("Quest title cannot be empty")

        async with read_connection("QUEST-EDIT") as conn:
            category_id = changes.get("status_category_id")
            if category_id is not None and not await category_repo.get_category(conn, user_id, category_id):
                raise NotFoundError("Category", category_id)

            row = await completion_repo.update_fields(conn, "quests", user_id, quest_id, changes)

        if row is None:
            raise NotFoundError("Quest", quest_id)
        return Quest.from_row(row)

    async def list_quests(self, user_id: int, quest_type: str = None):
        async with read_connection("QUEST-LIST") as conn:
            rows = await activity_repo.list_quests(conn, user_id, quest_type)
        return [Quest.from_row(r) for r in rows]

    # ================================
    #  ✅ CompleteQuest
    # ================================
    async def complete_quest(self, user_id: int, quest_id: int) -> EventResult:
        async with ledger_transaction(user_id, "QUEST-COMPLETE") as ctx:
            quest = Quest.from_row(await ledger.complete_entity(ctx, "quests", "Quest", quest_id))
            reward = resolve_reward(quest.difficulty, exp=quest.exp_reward, hp=quest.hp_reward)

            before = ctx.profile
            await ledger.grant_profile_reward(ctx, reward.exp, reward.hp)

            category = None
            if quest.status_category_id is not None:
                category = await ledger.grant_category_exp(ctx, quest.status_category_id, reward.exp)

            if quest.is_daily:
                await streak_service.apply_tick(ctx)

            profile = ctx.profile

        logging.info(
            f"✅ [QUEST-COMPLETE] user={user_id} quest={quest_id} "
            f"exp {before.exp} -> {profile.exp}, level {before.level} -> {profile.level}, "
            f"hp {before.hp} -> {profile.hp}"
        )

        badges = await badge_service.evaluate_after_commit(user_id)
        return EventResult(profile=profile, category=category, awarded_badges=badges)

    # ================================
    #  ↩️ UncompleteQuest (rewards are kept)
    # ================================
    async def uncomplete_quest(self, user_id: int, quest_id: int) -> EventResult:
        async with ledger_transaction(user_id, "QUEST-UNCOMPLETE") as ctx:
            quest = Quest.from_row(await ledger.uncomplete_entity(ctx, "quests", "Quest", quest_id))

            if quest.is_daily:
                await streak_service.apply_tick(ctx)

            profile = ctx.profile

        logging.info(f"↩️ [QUEST-UNCOMPLETE] user={user_id} quest={quest_id}")
        return EventResult(profile=profile)

    # ================================
    #  ❌ FailQuest (penalty)
    # ================================
    async def fail_quest(self, user_id: int, quest_id: int) -> EventResult:
        async with ledger_transaction(user_id, "QUEST-FAIL") as ctx:
            quest = Quest.from_row(
                await completion_repo.get_for_update(ctx.conn, "quests", user_id, quest_id)
            )
            if quest is None:
                raise NotFoundError("Quest", quest_id)

            if (quest.quest_type or "").lower() not in PENALTY_QUEST_TYPES:
                logging.warning(
                    f"⛔ [QUEST-FAIL] user={user_id} quest={quest_id} type={quest.quest_type}: no penalty"
                )
                raise PenaltyNotApplicable(quest.quest_type)

            penalty = reward_for(quest.difficulty).penalty
            before = ctx.profile
            profile = await ledger.apply_exp_penalty(ctx, penalty)

        logging.info(
            f"❌ [QUEST-FAIL] user={user_id} quest={quest_id} penalty={penalty} "
            f"exp {before.exp} -> {profile.exp}"
        )
        return EventResult(profile=profile)


quest_service = QuestService()
