# services/streak_service.py

import logging
from datetime import date

from core.clock import local_today
from core.models import HunterProfile
from core.streak import StreakState, tick
from repositories import profile_repository as profile_repo
from services.ledger import LedgerContext, ledger_transaction


class StreakService:

    # -----------------------------------------
    # 🔥 Tick inside an already open ledger transaction
    # -----------------------------------------
    async def apply_tick(self, ctx: LedgerContext, today: date = None) -> HunterProfile:
        profile = ctx.profile
        today = today or local_today(profile.timezone)

        update = tick(
            StreakState(
                exp=profile.exp,
                streak=profile.streak,
                max_streak=profile.max_streak,
                progress_percentage=profile.progress_percentage,
                last_active_date=profile.last_active_date,
                exp_history=profile.exp_history,
            ),
            today,
        )

        if update is None:
            logging.info(f"[STREAK] user={ctx.user_id} already ticked on {today}, skipping")
            return profile

        row = await profile_repo.update_streak(
            ctx.conn,
            ctx.user_id,
            update.streak,
            update.max_streak,
            update.progress_percentage,
            update.last_active_date,
            update.exp_history,
        )

        logging.info(
            f"🔥 [STREAK] user={ctx.user_id} day={today} "
            f"streak {profile.streak} -> {update.streak}, progress={update.progress_percentage}%"
        )
        return ctx.refresh(row)

    # -----------------------------------------
    # 🔁 Standalone daily tick (TickStreak)
    # -----------------------------------------
    async def tick(self, user_id: int, today: date = None) -> HunterProfile:
        async with ledger_transaction(user_id, "STREAK") as ctx:
            return await self.apply_tick(ctx, today)


streak_service = StreakService()
