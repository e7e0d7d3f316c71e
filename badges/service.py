# badges/service.py

import logging

import config
from core.errors import AlreadyEarnedError, EngineError, NotFoundError, ValidationError
from core.models import Badge, BadgeCriteria
from services.ledger import LedgerContext, ledger_transaction, read_connection
from .conditions import gte
from .registry import METRICS
from .repository import BadgeRepository


class BadgeService:

    # -----------------------------------------
    # 🏅 Evaluate inside an open ledger transaction
    # -----------------------------------------
    async def evaluate_in(self, ctx: LedgerContext):
        repo = BadgeRepository(ctx.conn)
        awarded = []
        metrics = {}

        for row in await repo.list_unearned(ctx.user_id):
            badge = Badge.from_row(row)

            # manual-only badge
            if badge.is_manual:
                continue

            kind = badge.criteria.kind
            if kind not in metrics:
                metrics[kind] = await METRICS[kind](ctx)

            if not gte(metrics[kind], badge.criteria.threshold):
                continue

            if await repo.unlock(ctx.user_id, badge.id):
                logging.info(
                    f"🏅 [BADGE-AWARD] user={ctx.user_id} badge={badge.id} ({badge.name}) "
                    f"{kind.value}={metrics[kind]} >= {badge.criteria.threshold}"
                )
                awarded.append(badge)

        return awarded

    # -----------------------------------------
    # 🔁 EvaluateBadges
    # -----------------------------------------
    async def evaluate(self, user_id: int):
        async with ledger_transaction(user_id, "BADGE-EVAL") as ctx:
            return await self.evaluate_in(ctx)

    async def evaluate_after_commit(self, user_id: int):
        """
        Run after a ledger operation has committed. Controlled by AUTO_EVALUATE_BADGES.

        The operation itself already succeeded, so a failure here is logged and
        yields no badges. They are picked up by the next evaluation.
        """
        if not config.AUTO_EVALUATE_BADGES:
            return []
        try:
            return await self.evaluate(user_id)
        except EngineError:
            logging.exception(f"❌ [BADGE-EVAL] user={user_id} post-commit evaluation failed")
            return []

    # -----------------------------------------
    # ✋ Manual award (the only way to earn a badge without criteria)
    # -----------------------------------------
    async def award(self, user_id: int, badge_id: int) -> Badge:
        async with ledger_transaction(user_id, "BADGE-AWARD") as ctx:
            repo = BadgeRepository(ctx.conn)

            badge = Badge.from_row(await repo.get(user_id, badge_id))
            if badge is None:
                raise NotFoundError("Badge", badge_id)

            if not await repo.unlock(user_id, badge_id):
                logging.warning(f"⛔ [BADGE-AWARD] user={user_id} badge={badge_id} already earned")
                raise AlreadyEarnedError(badge_id)

        logging.info(f"🏅 [BADGE-AWARD] user={user_id} badge={badge_id} awarded manually")
        return badge

    # -----------------------------------------
    # ➕ Create badge
    # -----------------------------------------
    async def add_badge(
        self,
        user_id: int,
        name: str,
        description: str = None,
        criteria_type: str = None,
        criteria_value: float = None,
        image_url: str = None
    ) -> Badge:
        if not name or not name.strip():
            raise ValidationError("Badge name is required")

        criteria = BadgeCriteria.parse(criteria_type, criteria_value)

        async with read_connection("BADGE-ADD") as conn:
            row = await BadgeRepository(conn).insert(
                user_id,
                name.strip(),
                description,
                criteria.kind.value if criteria else None,
                criteria.threshold if criteria else None,
                image_url,
            )
        return Badge.from_row(row)

    # -----------------------------------------
    # 📜 Collection
    # -----------------------------------------
    async def get_collection(self, user_id: int):
        async with read_connection("BADGE-LIST") as conn:
            repo = BadgeRepository(conn)
            all_rows = await repo.list_all(user_id)
            earned_rows = await repo.list_earned(user_id)

        return {
            "all": [Badge.from_row(r) for r in all_rows],
            "earned": [Badge.from_row(r) for r in earned_rows],
        }


badge_service = BadgeService()
