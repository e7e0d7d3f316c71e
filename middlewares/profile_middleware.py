from aiogram import BaseMiddleware, types

from services.profile_service import profile_service


class ProfileMiddleware(BaseMiddleware):
    """Every sender gets a hunter profile before any handler runs."""

    async def __call__(self, handler, event, data):
        user = getattr(event, "from_user", None)

        # service messages, channel posts
        if user is None or user.is_bot:
            return await handler(event, data)

        if isinstance(event, (types.Message, types.CallbackQuery)):
            await profile_service.ensure_profile(user.id, user.full_name)

        return await handler(event, data)
