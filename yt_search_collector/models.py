"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal


def parse_timestamp(value: str) -> datetime:
    """Supabase が返す ISO 8601 文字列を aware datetime に変換する.

    タイムゾーン情報のない値は UTC とみなす。
    """
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_api_timestamp(dt: datetime) -> str:
    """YouTube API に渡す RFC 3339 (UTC, ミリ秒付き) 文字列に変換する."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class TimeWindow:
    """検索対象の 1 時間枠."""

    after: datetime  # 前の正時
    before: datetime  # 現在の正時

    @property
    def published_after(self) -> str:
        return to_api_timestamp(self.after)

    @property
    def published_before(self) -> str:
        return to_api_timestamp(self.before)


@dataclass(frozen=True)
class SearchKeyword:
    """search_keyword テーブルの 1 行."""

    id: int
    keyword: str
    starts_at: datetime
    ends_at: datetime
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> SearchKeyword:
        created_at = row.get("created_at")
        return cls(
            id=int(row["id"]),
            keyword=row["keyword"],
            starts_at=parse_timestamp(row["starts_at"]),
            ends_at=parse_timestamp(row["ends_at"]),
            created_at=parse_timestamp(created_at) if created_at else None,
        )


def is_active(keyword: SearchKeyword, window: TimeWindow) -> bool:
    """キーワードの有効期間が検索枠を含んでいるか判定する.

    search_keyword の検索条件と同じ 4 つの比較を行う。
    """
    return (
        keyword.starts_at <= window.after
        and keyword.starts_at <= window.before
        and keyword.ends_at >= window.after
        and keyword.ends_at >= window.before
    )


@dataclass
class KeywordSearchResult:
    """1 キーワード分の検索結果."""

    id: int  # search_keyword.id
    items: list[dict[str, Any]] = field(default_factory=list)
    truncated: bool = False  # ページ上限で打ち切った場合 True
    failed: bool = False  # 取得失敗で items を破棄した場合 True


@dataclass
class RunResult:
    """1 回の実行結果."""

    status: Literal["success", "skipped", "failed"]
    keyword_count: int = 0
    inserted_count: int = 0
    failed_keyword_ids: list[int] = field(default_factory=list)
    truncated_keyword_ids: list[int] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"
