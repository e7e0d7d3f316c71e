import asyncio
import logging
from aiogram import types
from aiogram import Bot, Dispatcher
from config import BOT_TOKEN, LOG_LEVEL
from database import create_pool, close_pool
from init_pg_db import create_tables

# Routers
from handlers.hunter_handler import router as hunter_router
from handlers.economy_handler import router as economy_router
from middlewares.profile_middleware import ProfileMiddleware

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


async def main():
    if not BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN is not set. Check .env")

    # 1) Bot and dispatcher
    bot = Bot(token=BOT_TOKEN)
    dp = Dispatcher()

    await bot.set_my_commands([
        types.BotCommand(command="start", description="Start"),
        types.BotCommand(command="profile", description="Hunter stats"),
        types.BotCommand(command="rename", description="Change hunter name"),
        types.BotCommand(command="badges", description="Badge collection"),
        types.BotCommand(command="tick", description="Update daily streak"),
    ])

    dp.message.middleware(ProfileMiddleware())
    dp.callback_query.middleware(ProfileMiddleware())

    # 2) Database (asyncpg pool)
    await create_pool()

    # 3) Schema
    await create_tables()
    logging.info("✅ Database connected and schema ensured")

    # 4) Routers
    dp.include_router(hunter_router)
    dp.include_router(economy_router)

    logging.info("🤖 Bot started...")
    try:
        await dp.start_polling(bot)
    finally:
        await close_pool()
        await bot.session.close()
        logging.info("🛑 Bot stopped, pool closed.")

if __name__ == "__main__":
    asyncio.run(main())
