# services/goal_service.py

import logging

from badges import badge_service
from core.errors import NotFoundError, ValidationError
from core.models import CategoryProgression, EventResult, Goal, GoalPatch
from repositories import category_repository as category_repo
from repositories import completion_repository as completion_repo
from repositories import activity_repository as activity_repo
from services import ledger
from services.ledger import ledger_transaction, read_connection

DEFAULT_GOAL_EXP = 100


class GoalService:

    # -----------------------------------------
    # 🗂 Categories
    # -----------------------------------------
    async def add_category(self, user_id: int, name: str, color: str = None, icon: str = None):
        if not name or not name.strip():
            raise ValidationError("Category name is required")

        async with read_connection("CATEGORY-ADD") as conn:
            row = await category_repo.insert_category(conn, user_id, name.strip(), color, icon)
        return CategoryProgression.from_row(row)

    async def list_categories(self, user_id: int):
        async with read_connection("CATEGORY-LIST") as conn:
            rows = await category_repo.list_categories(conn, user_id)
        return [CategoryProgression.from_row(r) for r in rows]

    # -----------------------------------------
    # 🎯 Goals
    # -----------------------------------------
    async def add_goal(
        self,
        user_id: int,
        category_id: int,
        title: str,
        exp_reward: int = DEFAULT_GOAL_EXP,
        description: str = None
    ) -> Goal:
        if not title or not title.strip():
            raise ValidationError("Goal title is required")
        if exp_reward is None or exp_reward < 0:
            raise ValidationError(f"Goal EXP reward cannot be negative: {exp_reward}")

        async with read_connection("GOAL-ADD") as conn:
            if not await category_repo.get_category(conn, user_id, category_id):
                raise NotFoundError("Category", category_id)
            row = await activity_repo.insert_goal(conn, user_id, category_id, title.strip(), exp_reward, description)

        return Goal.from_row(row)

    async def edit_goal(self, user_id: int, goal_id: int, patch: GoalPatch) -> Goal:
        changes = patch.changes()
        if "exp_reward" in changes and changes["exp_reward"] < 0:
            raise ValidationError(f"Goal EXP reward cannot be negative: {changes['exp_reward']}")
        if "title" in changes and not changes["title"].strip():
            raise ValidationError("Goal title cannot be empty")

        async with read_connection("GOAL-EDIT") as conn:
            row = await completion_repo.update_fields(conn, "goals", user_id, goal_id, changes)

        if row is None:
            raise NotFoundError("Goal", goal_id)
        return Goal.from_row(row)

    async def list_goals(self, user_id: int, category_id: int = None):
        async with read_connection("GOAL-LIST") as conn:
            rows = await activity_repo.list_goals(conn, user_id, category_id)
        return [Goal.from_row(r) for r in rows]

    # -----------------------------------------
    # ✅ CompleteGoal: category EXP + profile EXP, no HP
    # -----------------------------------------
    async def complete_goal(self, user_id: int, goal_id: int) -> EventResult:
        async with ledger_transaction(user_id, "GOAL-COMPLETE") as ctx:
            goal = Goal.from_row(await ledger.complete_entity(ctx, "goals", "Goal", goal_id))

            category = await ledger.grant_category_exp(ctx, goal.category_id, goal.exp_reward)
            profile = await ledger.grant_profile_reward(ctx, goal.exp_reward, 0)

        logging.info(
            f"🎯 [GOAL-COMPLETE] user={user_id} goal={goal_id} +{goal.exp_reward} EXP "
            f"(category={category.id} lvl {category.level}, profile lvl {profile.level})"
        )

        badges = await badge_service.evaluate_after_commit(user_id)
        return EventResult(profile=profile, category=category, awarded_badges=badges)

    async def uncomplete_goal(self, user_id: int, goal_id: int) -> EventResult:
        async with ledger_transaction(user_id, "GOAL-UNCOMPLETE") as ctx:
            await ledger.uncomplete_entity(ctx, "goals", "Goal", goal_id)
            profile = ctx.profile

        logging.info(f"↩️ [GOAL-UNCOMPLETE] user={user_id} goal={goal_id}")
        return EventResult(profile=profile)


goal_service = GoalService()
