import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand
from data.config import BOT_TOKEN, ADMIN_IDS
from data.store import OrderStoreClient
from bot.handlers import router
from utils.logging import setup_logging

logger = logging.getLogger(__name__)

async def set_bot_commands(bot: Bot):
    """Set up bot commands menu"""
    commands = [
        BotCommand(command="start", description="🚀 Start the bot"),
        BotCommand(command="orders", description="📋 Order board"),
        BotCommand(command="help", description="❓ Help"),
    ]
    await bot.set_my_commands(commands)

async def shutdown_handler(bot: Bot, store: OrderStoreClient):
    """Handle graceful shutdown"""
    logger.info("🛑 Shutting down, closing connections...")

    try:
        await bot.session.close()
    except Exception as e:
        logger.warning("Failed to close bot session: %s", e)

    try:
        await store.close()
    except Exception as e:
        logger.warning("Failed to close order store session: %s", e)

    logger.info("👋 Bot stopped")

async def main():
    setup_logging()

    if not BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN environment variable not set")
    if not ADMIN_IDS:
        logger.warning("ADMIN_IDS is empty; nobody will be able to use the board")

    store = OrderStoreClient()
    await store.connect()

    # Initialize bot; the store is injected into handlers as `store`
    bot = Bot(token=BOT_TOKEN)
    dp = Dispatcher(store=store)
    dp.include_router(router)

    await set_bot_commands(bot)

    logger.info("What The Food admin bot is running against %s", store.collection_url)
    logger.info("Press Ctrl+C to stop the bot gracefully")

    try:
        await dp.start_polling(bot)
    except asyncio.CancelledError:
        # This is expected when shutting down gracefully
        pass
    finally:
        await shutdown_handler(bot, store)

def run():
    """Console entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("👋 Bot stopped by user")
    except Exception as e:
        logger.critical("❌ Fatal error: %s", e)
        sys.exit(1)

if __name__ == "__main__":
    run()
