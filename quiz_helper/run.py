"""Main entry point for Quiz Helper."""
import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage, SimpleEventIsolation
from aiogram.types import BotCommand

from bot.config import settings
from bot.handlers import start, quiz

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def create_dispatcher() -> Dispatcher:
    """Dispatcher with all routers. Updates from one chat are handled one at a time."""
    dp = Dispatcher(storage=MemoryStorage(), events_isolation=SimpleEventIsolation())
    dp.include_router(start.router)
    dp.include_router(quiz.router)
    return dp


async def main():
    if not settings.BOT_TOKEN:
        print("Error: BOT_TOKEN is not set. Create a .env file based on .env.example")
        sys.exit(1)

    logger.info("Starting Quiz Helper...")

    bot = Bot(token=settings.BOT_TOKEN)
    dp = create_dispatcher()

    await bot.set_my_commands([
        BotCommand(command="start", description="Main menu"),
    ])

    try:
        logger.info("Starting bot polling...")
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types()
        )
    finally:
        await bot.session.close()
        logger.info("Bot stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)
