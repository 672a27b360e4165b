"""設定モジュール — 環境変数・定数定義."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from yt_search_collector.errors import ConfigError

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- YouTube Data API ---
SEARCH_API_URL = "https://www.googleapis.com/youtube/v3/search"
SEARCH_PART = "snippet"
SEARCH_TYPE = "video"
SEARCH_ORDER = "date"
SEARCH_PAGE_SIZE = 50

# 簡易版 (run_simple) の既定値
DEFAULT_SIMPLE_KEYWORD = "search keyword"
SIMPLE_PAGE_SIZE = 1

# --- リクエスト設定 ---
REQUEST_TIMEOUT = 15  # 秒
DEFAULT_MAX_PAGES = 20
DEFAULT_CONCURRENCY = 4

# --- Supabase テーブル ---
KEYWORD_TABLE = "search_keyword"
RESULT_TABLE = "search_result"

# --- ログ ---
LOG_DIR = _PROJECT_ROOT / "logs"

# 環境変数名 -> Settings のフィールド名
_REQUIRED_ENV = {
    "GOOGLE_API_KEY": "google_api_key",
    "SUPABASE_URL": "supabase_url",
    "SUPABASE_ANON_KEY": "supabase_anon_key",
    "SUPABASE_SERVICE_EMAIL": "service_email",
    "SUPABASE_SERVICE_PASSWORD": "service_password",
}


@dataclass(frozen=True)
class Settings:
    """実行時の設定値 (シークレットと任意の調整値)."""

    google_api_key: str
    supabase_url: str
    supabase_anon_key: str
    service_email: str
    service_password: str
    max_pages: int = DEFAULT_MAX_PAGES
    concurrency: int = DEFAULT_CONCURRENCY
    search_timezone: str = ""  # 空ならプロセスのローカルタイム


def _positive_int(env, name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} は整数で指定してください: {raw!r}") from None
    if value < 1:
        raise ConfigError(f"{name} は 1 以上で指定してください: {raw!r}")
    return value


def _timezone_name(env) -> str:
    name = env.get("SEARCH_TIMEZONE", "")
    if name:
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigError(f"SEARCH_TIMEZONE が不正です: {name!r}") from None
    return name


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """環境変数から Settings を組み立てる.

    Raises:
        ConfigError: 必須の環境変数が未設定・空の場合、または任意の値が不正な場合
    """
    env = os.environ if environ is None else environ
    missing = [name for name in _REQUIRED_ENV if not env.get(name)]
    if missing:
        raise ConfigError(f"環境変数が未設定です: {', '.join(missing)}")
    return Settings(
        **{field: env[name] for name, field in _REQUIRED_ENV.items()},
        max_pages=_positive_int(env, "SEARCH_MAX_PAGES", DEFAULT_MAX_PAGES),
        concurrency=_positive_int(env, "SEARCH_CONCURRENCY", DEFAULT_CONCURRENCY),
        search_timezone=_timezone_name(env),
    )
