"""YouTube キーワード検索 — メインエントリーポイント.

処理フロー:
  1. 直前の 1 時間枠を計算
  2. DB から有効なキーワードを取得 (0 件ならここで終了)
  3. サービスアカウントで Supabase に認証
  4. 各キーワードで全ページを検索 (キーワード単位で並列)
  5. 検索結果をキーワード ID 付きで一括書き込み
"""

from __future__ import annotations

import logging
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from zoneinfo import ZoneInfo

import requests

from yt_search_collector.config import (
    LOG_DIR,
    Settings,
    load_settings,
)
from yt_search_collector.db import (
    create_store_client,
    flatten_results,
    get_active_keywords,
    insert_search_results,
    sign_in,
)
from yt_search_collector.errors import CollectorError
from yt_search_collector.models import RunResult
from yt_search_collector.searcher import search_all
from yt_search_collector.window import compute_window

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """ロギングの初期設定."""
    LOG_DIR.mkdir(exist_ok=True)
    log_file = LOG_DIR / f"collector_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def _search_timezone(settings: Settings):
    return ZoneInfo(settings.search_timezone) if settings.search_timezone else None


def run_search(
    client,
    settings: Settings,
    now: datetime | None = None,
    http=requests,
    max_pages: int | None = None,
    concurrency: int | None = None,
) -> RunResult:
    """検索 1 回分の処理を行い、結果を RunResult で返す.

    max_pages / concurrency は未指定なら settings の値を使う。
    例外はここで捕捉してログに出し、status="failed" として返す。
    """
    max_pages = max_pages or settings.max_pages
    concurrency = concurrency or settings.concurrency
    logger.info("=== YouTube 検索 開始 ===")
    start_time = time.time()
    keyword_count = 0

    try:
        window = compute_window(now, _search_timezone(settings))
        logger.info("検索枠: %s〜%s", window.published_after, window.published_before)

        # 1. 有効なキーワードを取得
        keywords = get_active_keywords(client, window)
        if not keywords:
            logger.warning("有効なキーワードがありません。終了します。")
            return RunResult(status="skipped")
        keyword_count = len(keywords)
        logger.info("有効なキーワード: %d 件", keyword_count)

        # 2. 書き込み前に認証
        sign_in(client, settings.service_email, settings.service_password)

        # 3. キーワード単位で並列検索 (map は入力順で結果を返す)
        with ThreadPoolExecutor(max_workers=max(1, concurrency)) as executor:
            results = list(executor.map(
                lambda k: search_all(k, window, settings.google_api_key, http, max_pages),
                keywords,
            ))

        # 4. 一括書き込み
        records = flatten_results(results)
        logger.info("DB 書き込み: search_result=%d 件", len(records))
        insert_search_results(client, records)
    except CollectorError as e:
        logger.error("検索処理失敗: %s", e)
        return RunResult(status="failed", keyword_count=keyword_count, error=str(e))
    except Exception as e:
        logger.exception("予期しないエラー")
        return RunResult(status="failed", keyword_count=keyword_count, error=repr(e))

    failed_ids = [r.id for r in results if r.failed]
    truncated_ids = [r.id for r in results if r.truncated]

    elapsed = time.time() - start_time
    logger.info("=== YouTube 検索 完了 ===")
    logger.info("キーワード: %d 件, 取得: %d 件, 打ち切り: %d 件, 所要時間: %.1f 秒",
                keyword_count, len(records), len(truncated_ids), elapsed)
    return RunResult(
        status="success",
        keyword_count=keyword_count,
        inserted_count=len(records),
        failed_keyword_ids=failed_ids,
        truncated_keyword_ids=truncated_ids,
    )


def run() -> int:
    """メイン処理."""
    setup_logging()
    try:
        settings = load_settings()
        client = create_store_client(settings)
    except CollectorError as e:
        logger.error("設定エラー: %s", e)
        return 1

    result = run_search(client, settings)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(run())
