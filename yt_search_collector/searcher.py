"""YouTube Data API (search.list) の検索モジュール.

nextPageToken をたどって全ページを取得する。ページ取得は前ページのトークンに
依存するため、1 キーワード内では逐次実行になる。
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from yt_search_collector.config import (
    DEFAULT_SIMPLE_KEYWORD,
    DEFAULT_MAX_PAGES,
    REQUEST_TIMEOUT,
    SEARCH_API_URL,
    SEARCH_ORDER,
    SEARCH_PAGE_SIZE,
    SEARCH_PART,
    SEARCH_TYPE,
    SIMPLE_PAGE_SIZE,
)
from yt_search_collector.errors import FetchError
from yt_search_collector.models import KeywordSearchResult, SearchKeyword, TimeWindow
from yt_search_collector.window import compute_window

logger = logging.getLogger(__name__)


def build_query_params(
    keyword: str,
    window: TimeWindow,
    api_key: str,
    page_token: str = "",
    max_results: int = SEARCH_PAGE_SIZE,
    order: str | None = SEARCH_ORDER,
) -> dict[str, str]:
    """search.list のクエリパラメータを組み立てる. order=None なら並び順を指定しない."""
    params = {
        "part": SEARCH_PART,
        "type": SEARCH_TYPE,
        "q": keyword,
        "publishedBefore": window.published_before,
        "publishedAfter": window.published_after,
        "maxResults": str(max_results),
        "pageToken": page_token,
        "key": api_key,
    }
    if order is not None:
        params["order"] = order
    return params


def fetch_search_page(params: dict[str, str], http=requests) -> dict[str, Any]:
    """search.list を 1 回呼び出し、レスポンスの JSON を返す.

    Args:
        params: build_query_params で組み立てたパラメータ
        http: get() を持つ HTTP クライアント (requests / requests.Session)

    Raises:
        FetchError: 通信エラー、2xx 以外のステータス、JSON 解析エラー、
            items / nextPageToken の型が不正なレスポンス
    """
    try:
        resp = http.get(SEARCH_API_URL, params=params, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise FetchError(f"検索 API 呼び出し失敗: q={params.get('q')}, error={e}") from e
    except ValueError as e:
        raise FetchError(f"検索 API レスポンス解析失敗: q={params.get('q')}, error={e}") from e

    if not isinstance(data, dict):
        raise FetchError(f"検索 API レスポンスが不正です: q={params.get('q')}")
    items = data.get("items")
    if items is not None and not isinstance(items, list):
        raise FetchError(f"items が配列ではありません: q={params.get('q')}")
    token = data.get("nextPageToken")
    if token is not None and not isinstance(token, str):
        raise FetchError(f"nextPageToken が文字列ではありません: q={params.get('q')}")
    return data


def search_all(
    keyword: SearchKeyword,
    window: TimeWindow,
    api_key: str,
    http=requests,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> KeywordSearchResult:
    """1 キーワードについて全ページの検索結果を取得する.

    どこかのページで失敗した場合は、それまでに取得したページも含めて破棄し、
    items を空にした結果を返す。max_pages に達した時点で次ページが残っていれば
    truncated=True を立てる。
    """
    items: list[dict[str, Any]] = []
    page_token = ""
    pages = 0

    try:
        while True:
            params = build_query_params(keyword.keyword, window, api_key, page_token)
            data = fetch_search_page(params, http)
            pages += 1
            items.extend(data.get("items") or [])

            page_token = data.get("nextPageToken") or ""
            if not page_token:
                break
            if pages >= max_pages:
                logger.warning(
                    "ページ上限で打ち切り: keyword=%s, pages=%d, items=%d",
                    keyword.keyword, pages, len(items),
                )
                return KeywordSearchResult(id=keyword.id, items=items, truncated=True)
    except FetchError as e:
        logger.error("検索失敗: keyword_id=%d, keyword=%s, error=%s", keyword.id, keyword.keyword, e)
        return KeywordSearchResult(id=keyword.id, failed=True)

    logger.info("検索完了: keyword=%s, pages=%d, items=%d", keyword.keyword, pages, len(items))
    return KeywordSearchResult(id=keyword.id, items=items)


def run_simple(
    api_key: str,
    keyword: str = DEFAULT_SIMPLE_KEYWORD,
    window: TimeWindow | None = None,
    http=requests,
) -> dict[str, Any]:
    """直前 1 時間枠で 1 件だけ検索し、API のレスポンスをそのまま返す.

    ステータスコードは確認せず、エラー時の JSON (quota 超過など) もそのまま返す。
    通信エラーや JSON 解析エラーの場合は空の dict を返す。
    """
    if window is None:
        window = compute_window()
    params = build_query_params(
        keyword, window, api_key, max_results=SIMPLE_PAGE_SIZE, order=None,
    )
    try:
        resp = http.get(SEARCH_API_URL, params=params, timeout=REQUEST_TIMEOUT)
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("簡易検索失敗: q=%s, error=%s", keyword, e)
        return {}

    if not isinstance(data, dict):
        logger.error("簡易検索のレスポンスが不正です: q=%s", keyword)
        return {}
    if "error" in data:
        logger.warning("検索 API がエラーを返しました: status=%s", resp.status_code)
    return data
