"""Supabase データベース操作モジュール.

クライアントはモジュール内で生成せず、呼び出し側から受け取る。
"""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, create_client

from yt_search_collector.config import KEYWORD_TABLE, RESULT_TABLE, Settings
from yt_search_collector.errors import AuthError, ConfigError, WriteError
from yt_search_collector.models import KeywordSearchResult, SearchKeyword, TimeWindow, is_active

logger = logging.getLogger(__name__)


def create_store_client(settings: Settings) -> Client:
    """anon key で Supabase クライアントを生成する.

    Raises:
        ConfigError: URL やキーが不正でクライアントを生成できない場合
    """
    try:
        return create_client(settings.supabase_url, settings.supabase_anon_key)
    except Exception as e:
        raise ConfigError(f"Supabase クライアント生成失敗: url={settings.supabase_url}, error={e}") from e


def sign_in(client: Client, email: str, password: str) -> None:
    """サービスアカウントでサインインする.

    Raises:
        AuthError: 認証に失敗した場合
    """
    try:
        client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        raise AuthError(f"Supabase 認証失敗: email={email}, error={e}") from e
    logger.info("Supabase 認証成功: email=%s", email)


def get_active_keywords(client: Client, window: TimeWindow) -> list[SearchKeyword]:
    """有効期間が検索枠を含むキーワードを取得する.

    取得に失敗した場合も例外は投げず空リストを返す。
    """
    after = window.after.isoformat()
    before = window.before.isoformat()
    try:
        resp = (
            client.table(KEYWORD_TABLE)
            .select("id, keyword, starts_at, ends_at, created_at")
            .lte("starts_at", after)
            .lte("starts_at", before)
            .gte("ends_at", after)
            .gte("ends_at", before)
            .execute()
        )
        keywords = [SearchKeyword.from_row(row) for row in resp.data or []]
    except Exception as e:
        logger.error("キーワード取得失敗: window=%s〜%s, error=%s", after, before, e)
        return []

    return [k for k in keywords if is_active(k, window)]


def flatten_results(results: list[KeywordSearchResult]) -> list[dict[str, Any]]:
    """キーワード別の検索結果を search_result 用のレコード列にまとめる.

    キーワードの順序、キーワード内の動画の順序をそのまま保つ。
    """
    return [
        {"item": item, "search_keyword_id": result.id}
        for result in results
        for item in result.items
    ]


def insert_search_results(client: Client, records: list[dict[str, Any]]) -> None:
    """検索結果レコードを一括挿入する.

    Args:
        records: [{"item", "search_keyword_id"}, ...]

    Raises:
        WriteError: 挿入に失敗した場合
    """
    if not records:
        return
    try:
        client.table(RESULT_TABLE).insert(records).execute()
    except Exception as e:
        raise WriteError(f"{RESULT_TABLE} への挿入失敗: {e}") from e
    logger.info("%s に %d 件挿入", RESULT_TABLE, len(records))
