from __future__ import annotations

import asyncio
import logging
import shutil
import uuid
from pathlib import Path
from typing import Callable

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import FSInputFile, Message

from slide_shrink_bot.processor import CannotShrink, ParseError, ShrinkError, ShrinkResult
from slide_shrink_bot.sizes import human_bytes


class BotHandlers:
    """Telegram handlers: receive a slide deck PDF, send back the shrunk one."""

    def __init__(
            self,
            shrink_pdf: Callable[..., ShrinkResult],
            work_dir: Path,
            telegram_max_file_size: int,
            internal_max_file_size: int,
            process_lock: asyncio.Lock,
            text_fallback: bool = True,
            compress_output: bool = True,
    ) -> None:
        self.shrink_pdf = shrink_pdf
        self.work_dir = work_dir
        self.telegram_max_file_size = telegram_max_file_size
        self.internal_max_file_size = internal_max_file_size
        self.process_lock = process_lock
        self.text_fallback = text_fallback
        self.compress_output = compress_output
        self.logger = logging.getLogger("slide_shrink.bot.handlers")

    async def cmd_start(self, message: Message) -> None:
        await message.answer(
            "Привет! Пришли PDF со слайдами.\n\n"
            "Если презентация экспортирована с анимациями (каждый шаг — отдельная страница), "
            "я оставлю только последнюю страницу каждого слайда."
        )

    async def handle_document(self, message: Message, bot: Bot) -> None:
        document = message.document
        if not document:
            return

        original_filename = document.file_name or "slides.pdf"
        file_size = document.file_size or 0

        if file_size > self.telegram_max_file_size:
            await message.reply(
                "Этот файл слишком большой для Telegram-бота "
                f"(лимит {human_bytes(self.telegram_max_file_size)})."
            )
            return

        if file_size > self.internal_max_file_size:
            await message.reply("Файл слишком большой для обработки.")
            return

        if not original_filename.lower().endswith(".pdf"):
            await message.reply("Пожалуйста, пришлите PDF-файл.")
            return

        request_id = uuid.uuid4().hex
        adapter = logging.LoggerAdapter(self.logger, {"request_id": request_id})
        adapter.info("Incoming file: name=%s size=%s bytes", original_filename, file_size)

        rd = self.work_dir / request_id
        rd.mkdir(parents=True, exist_ok=True)
        input_pdf = rd / "input.pdf"
        output_pdf = rd / f"{Path(original_filename).stem}_slides.pdf"

        try:
            try:
                tg_file = await bot.get_file(document.file_id)
            except TelegramBadRequest as e:
                adapter.exception("TelegramBadRequest on get_file: %s", e)
                await message.reply("Telegram отказался отдавать файл (скорее всего, он слишком большой).")
                return

            await bot.download_file(tg_file.file_path, destination=input_pdf)

            try:
                async with self.process_lock:
                    result = await asyncio.to_thread(
                        self.shrink_pdf,
                        input_pdf,
                        output_pdf,
                        text_fallback=self.text_fallback,
                        compress=self.compress_output,
                    )
            except ParseError as e:
                adapter.warning("Not a PDF: %s", e)
                await message.reply("Не смог открыть PDF (возможно файл повреждён).")
                return
            except CannotShrink as e:
                adapter.info("Cannot shrink: %s", e)
                await message.reply(
                    "Не нашёл номеров слайдов: в PDF нет меток страниц и колонтитулов вида «N/M». "
                    "Похоже, сжимать нечего."
                )
                return
            except ShrinkError as e:
                adapter.exception("Processing failed: %s", e)
                await message.reply("Произошла ошибка при обработке PDF. Проверьте лог сервера.")
                return

            adapter.info(
                "Result: pages %s -> %s, size=%s bytes",
                result.pages_before,
                result.pages_after,
                len(result.data),
            )

            if len(result.data) > self.telegram_max_file_size:
                await message.reply("Результат получился больше лимита Telegram, отправить не могу.")
                return

            await message.reply_document(
                document=FSInputFile(path=str(output_pdf), filename=output_pdf.name),
                caption=f"Готово! Страниц было {result.pages_before}, стало {result.pages_after}.",
            )
        finally:
            shutil.rmtree(rd, ignore_errors=True)
