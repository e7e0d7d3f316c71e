# services/profile_service.py

import logging
from html import escape

from config import DEFAULT_TIMEZONE
from core.errors import LevelLockedError, NotFoundError, ValidationError
from core.models import HunterProfile, Item, ProfilePicture
from repositories import item_repository as item_repo
from repositories import profile_repository as profile_repo
from services.ledger import ledger_transaction, read_connection


MAX_NAME_LENGTH = 64


class ProfileService:

    async def ensure_profile(self, user_id: int, name: str = None, timezone: str = None) -> bool:
        """Create the hunter profile on first contact. Returns True if it was created."""
        async with read_connection("PROFILE-ENSURE") as conn:
            created = await profile_repo.insert_profile(conn, user_id, name, timezone or DEFAULT_TIMEZONE)

        if created:
            logging.info(f"🆕 [PROFILE] Created hunter profile for user={user_id}")
        return created

    async def get_profile(self, user_id: int) -> HunterProfile:
        async with read_connection("PROFILE-GET") as conn:
            row = await profile_repo.get_profile(conn, user_id)

        if row is None:
            raise NotFoundError("Profile", user_id)
        return HunterProfile.from_row(row)

    async def rename_profile(self, user_id: int, name: str) -> HunterProfile:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Name is too long: {len(name)} characters (max {MAX_NAME_LENGTH})")

        async with read_connection("PROFILE-RENAME") as conn:
            row = await profile_repo.update_name(conn, user_id, name)

        if row is None:
            raise NotFoundError("Profile", user_id)

        logging.info(f"🪪 [PROFILE-RENAME] user={user_id} name={name!r}")
        return HunterProfile.from_row(row)

    async def build_profile_text(self, user_id: int) -> str:
        p = await self.get_profile(user_id)

        async with read_connection("ITEM-INVENTORY") as conn:
            inventory = [Item.from_row(r) for r in await item_repo.list_purchased_items(conn, user_id)]
        owned = ", ".join(escape(item.name) for item in inventory) or "empty"

        return (
            "<pre>"
            f"🪪 Hunter:        {escape(p.name) if p.name else '-'}\n"
            "--------------------------------------\n"
            f"⭐ Level:         {p.level}\n"
            f"✨ EXP:           {p.exp} / {p.exp_needed} ({p.level_progress:.0f}%)\n"
            f"❤️ HP:            {p.hp} / 100\n"
            f"💰 Gold:          {p.spendable_gold} (earned {p.gold_earned}, spent {p.gold_spent})\n"
            "--------------------------------------\n"
            f"🔥 Streak:        {p.streak} (best {p.max_streak})\n"
            f"📈 Daily change:  {p.progress_percentage:.0f}%\n"
            "--------------------------------------\n"
            f"🎒 Inventory:     {owned}\n"
            "</pre>"
        )

    # -----------------------------------------
    # 🖼 Level-gated profile pictures
    # -----------------------------------------
    async def add_profile_picture(self, user_id: int, pfp_url: str, level_threshold: int = 1) -> ProfilePicture:
        if not pfp_url:
            raise ValidationError("Picture URL is required")
        if level_threshold < 1:
            raise ValidationError(f"Level threshold must be at least 1: {level_threshold}")

        async with read_connection("PFP-ADD") as conn:
            row = await item_repo.insert_profile_picture(conn, user_id, pfp_url, level_threshold)
        return ProfilePicture.from_row(row)

    async def list_profile_pictures(self, user_id: int):
        async with read_connection("PFP-LIST") as conn:
            rows = await item_repo.list_profile_pictures(conn, user_id)
        return [ProfilePicture.from_row(r) for r in rows]

    async def select_profile_picture(self, user_id: int, picture_id: int) -> HunterProfile:
        async with ledger_transaction(user_id, "PFP-SELECT") as ctx:
            picture = ProfilePicture.from_row(await item_repo.get_profile_picture(ctx.conn, user_id, picture_id))
            if picture is None:
                raise NotFoundError("Profile picture", picture_id)

            if ctx.profile.level < picture.level_threshold:
                raise LevelLockedError(picture.level_threshold, ctx.profile.level)

            row = await profile_repo.set_current_pfp(ctx.conn, user_id, picture.pfp_url)
            profile = ctx.refresh(row)

        logging.info(f"🖼 [PFP-SELECT] user={user_id} picture={picture_id}")
        return profile


profile_service = ProfileService()
