from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    bot_token: str
    work_dir: Path
    logs_dir: Path

    telegram_max_file_size: int
    internal_max_file_size: int

    text_fallback: bool
    compress_output: bool

    web_user: str
    web_password: str

    log_level: str

    @staticmethod
    def from_env() -> "Settings":
        bot_token = os.getenv("BOT_TOKEN", "").strip()

        work_dir = Path(os.getenv("WORK_DIR", "data"))
        logs_dir = Path(os.getenv("LOGS_DIR", "logs"))

        # Bot API refuses to hand out files above 20 MB
        telegram_max = _env_int("TELEGRAM_MAX_FILE_SIZE", 20 * 1024 * 1024)
        internal_max = _env_int("INTERNAL_MAX_FILE_SIZE", 1 * 1024 * 1024 * 1024)

        text_fallback = _env_bool("TEXT_FALLBACK", True)
        compress_output = _env_bool("COMPRESS_OUTPUT", True)

        # HTTP API stays closed until both are set
        web_user = os.getenv("WEB_USER", "").strip()
        web_password = os.getenv("WEB_PASSWORD", "").strip()

        log_level = os.getenv("LOG_LEVEL", "INFO").strip()

        return Settings(
            bot_token=bot_token,
            work_dir=work_dir,
            logs_dir=logs_dir,
            telegram_max_file_size=telegram_max,
            internal_max_file_size=internal_max,
            text_fallback=text_fallback,
            compress_output=compress_output,
            web_user=web_user,
            web_password=web_password,
            log_level=log_level,
        )
