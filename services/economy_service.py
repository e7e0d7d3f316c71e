# services/economy_service.py

import logging

from badges import badge_service
from core.economy import check_reward_redeem, check_shop_purchase, validate_item_fields
from core.errors import AlreadyPurchasedError, ConflictError, EngineError, NotFoundError, ValidationError
from core.models import EventResult, Item, ItemType
from repositories import item_repository as item_repo
from repositories import profile_repository as profile_repo
from services.ledger import ledger_transaction, read_connection


class EconomyService:

    # -----------------------------------------
    # ➕ Create shop / reward item
    # -----------------------------------------
    async def add_item(
        self,
        user_id: int,
        name: str,
        item_type: str,
        price: int,
        required_level: int = 1,
        image_url: str = None
    ) -> Item:
        if not name or not name.strip():
            raise ValidationError("Item name is required")

        kind = validate_item_fields(item_type, price, required_level)

        async with read_connection("ITEM-ADD") as conn:
            row = await item_repo.insert_item(conn, user_id, name.strip(), kind.value, price, required_level, image_url)

        item = Item.from_row(row)
        logging.info(f"➕ [ITEM-ADD] user={user_id} item={item.id} {item.item_type} price={item.price}")
        return item

    async def list_items(self, user_id: int, item_type: str = ItemType.SHOP.value):
        async with read_connection("ITEM-LIST") as conn:
            rows = await item_repo.list_items(conn, user_id, item_type)
        return [Item.from_row(r) for r in rows]

    async def list_purchased_items(self, user_id: int):
        """Shop items already bought, newest first."""
        async with read_connection("ITEM-INVENTORY") as conn:
            rows = await item_repo.list_purchased_items(conn, user_id)
        return [Item.from_row(r) for r in rows]

    # -----------------------------------------
    # 💰 PurchaseShopItem: one-time, costs gold
    # -----------------------------------------
    async def purchase_shop_item(self, user_id: int, item_id: int) -> EventResult:
        try:
            async with ledger_transaction(user_id, "SHOP-PURCHASE") as ctx:
                item = Item.from_row(await item_repo.lock_item(ctx.conn, user_id, item_id))
                if item is None:
                    raise NotFoundError("Item", item_id)

                # validated against the locked, latest committed profile
                check_shop_purchase(ctx.profile, item)

                if await item_repo.mark_item_purchased(ctx.conn, user_id, item_id) is None:
                    raise AlreadyPurchasedError(item_id)

                row = await profile_repo.spend_gold(ctx.conn, user_id, item.price)
                if row is None:
                    raise ConflictError(f"Gold balance changed while buying item {item_id}")
                profile = ctx.refresh(row)

        except EngineError as exc:
            logging.warning(f"⛔ [SHOP-PURCHASE] user={user_id} item={item_id} refused: {exc.kind} ({exc})")
            raise

        logging.info(
            f"💰 [SHOP-PURCHASE] user={user_id} item={item_id} -{item.price} gold "
            f"(spendable={profile.spendable_gold})"
        )

        badges = await badge_service.evaluate_after_commit(user_id)
        return EventResult(profile=profile, awarded_badges=badges)

    # -----------------------------------------
    # ❤️ RedeemReward: repeatable, costs HP
    # -----------------------------------------
    async def redeem_reward(self, user_id: int, item_id: int) -> EventResult:
        try:
            async with ledger_transaction(user_id, "REWARD-REDEEM") as ctx:
                item = Item.from_row(await item_repo.lock_item(ctx.conn, user_id, item_id))
                if item is None:
                    raise NotFoundError("Item", item_id)

                check_reward_redeem(ctx.profile, item)

                row = await profile_repo.spend_hp(ctx.conn, user_id, item.price)
                if row is None:
                    raise ConflictError(f"HP changed while redeeming reward {item_id}")
                profile = ctx.refresh(row)

        except EngineError as exc:
            logging.warning(f"⛔ [REWARD-REDEEM] user={user_id} item={item_id} refused: {exc.kind} ({exc})")
            raise

        logging.info(f"❤️ [REWARD-REDEEM] user={user_id} item={item_id} -{item.price} HP (hp={profile.hp})")
        return EventResult(profile=profile)


economy_service = EconomyService()
