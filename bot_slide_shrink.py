import asyncio

from slide_shrink_bot.bot.app import run_bot
from slide_shrink_bot.logging_setup import setup_logging
from slide_shrink_bot.settings import Settings


async def main() -> None:
    settings = Settings.from_env()

    setup_logging(settings.logs_dir, level=settings.log_level)

    await run_bot(settings)


if __name__ == "__main__":
    asyncio.run(main())
