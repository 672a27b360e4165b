"""FastAPI エンドポイント (cron からの HTTP 呼び出し用).

実行結果はログでのみ確認する。スケジュール版は成否にかかわらず空の 200 を返す。
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Response

from yt_search_collector.config import load_settings
from yt_search_collector.db import create_store_client
from yt_search_collector.errors import CollectorError
from yt_search_collector.main import run_search, setup_logging
from yt_search_collector.searcher import run_simple

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield


app = FastAPI(
    title="YouTube Search Collector",
    description="Hourly YouTube keyword search collector",
    version="0.1.0",
    lifespan=lifespan,
)


def get_runner():
    """設定と Supabase クライアントを組み立て、run_search を呼ぶ関数を返す."""

    def _run():
        settings = load_settings()
        return run_search(create_store_client(settings), settings)

    return _run


def get_api_key() -> str:
    return os.environ.get("GOOGLE_API_KEY", "")


@app.post("/search-youtube-cron-job")
def search_youtube_cron_job(runner=Depends(get_runner)):
    """キーワード検索を 1 回実行する. レスポンスは常に空."""
    try:
        result = runner()
    except CollectorError as e:
        logger.error("設定エラー: %s", e)
    except Exception:
        logger.exception("予期しないエラー")
    else:
        logger.info("実行結果: status=%s, inserted=%d", result.status, result.inserted_count)
    return Response(status_code=200)


@app.post("/search-youtube")
def search_youtube(api_key: str = Depends(get_api_key)):
    """直前 1 時間枠で 1 件検索し、API レスポンスをそのまま返す."""
    if not api_key:
        logger.warning("GOOGLE_API_KEY が未設定です")
    return run_simple(api_key)
