"""Bot application wiring (dispatcher, dependencies, polling)."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher, F
from aiogram.filters import CommandStart

from slide_shrink_bot.bot.handlers import BotHandlers
from slide_shrink_bot.processor import shrink_pdf
from slide_shrink_bot.settings import Settings


def build_dispatcher(settings: Settings) -> Dispatcher:
    """Create a dispatcher with the document handlers registered."""
    dp = Dispatcher()

    handlers = BotHandlers(
        shrink_pdf=shrink_pdf,
        work_dir=settings.work_dir,
        telegram_max_file_size=settings.telegram_max_file_size,
        internal_max_file_size=settings.internal_max_file_size,
        process_lock=asyncio.Lock(),
        text_fallback=settings.text_fallback,
        compress_output=settings.compress_output,
    )

    dp.message.register(handlers.cmd_start, CommandStart())
    dp.message.register(handlers.handle_document, F.document)
    return dp


async def run_bot(settings: Settings) -> None:
    """Run aiogram polling loop."""
    if not settings.bot_token:
        raise RuntimeError("BOT_TOKEN is empty. Provide it via environment variables.")

    settings.work_dir.mkdir(parents=True, exist_ok=True)

    bot = Bot(settings.bot_token)
    dp = build_dispatcher(settings)

    logging.getLogger("slide_shrink.main").info("Bot started. Waiting for updates...")
    await dp.start_polling(bot)
