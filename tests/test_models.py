"""models モジュールのユニットテスト."""

from datetime import datetime, timedelta, timezone

import pytest

from yt_search_collector.models import (
    SearchKeyword,
    TimeWindow,
    is_active,
    parse_timestamp,
    to_api_timestamp,
)

UTC = timezone.utc
WINDOW = TimeWindow(
    after=datetime(2026, 10, 17, 2, 0, tzinfo=UTC),
    before=datetime(2026, 10, 17, 3, 0, tzinfo=UTC),
)


def _keyword(starts_at: datetime, ends_at: datetime) -> SearchKeyword:
    return SearchKeyword(id=1, keyword="kw", starts_at=starts_at, ends_at=ends_at)


class TestIsActive:
    """is_active のテスト."""

    def test_contains_window(self):
        k = _keyword(datetime(2026, 10, 1, tzinfo=UTC), datetime(2026, 11, 1, tzinfo=UTC))
        assert is_active(k, WINDOW) is True

    def test_exact_bounds(self):
        """有効期間と検索枠が一致する場合も対象になること."""
        assert is_active(_keyword(WINDOW.after, WINDOW.before), WINDOW) is True

    @pytest.mark.parametrize("starts_at, ends_at", [
        # 枠の途中で開始
        (datetime(2026, 10, 17, 2, 30, tzinfo=UTC), datetime(2026, 11, 1, tzinfo=UTC)),
        # 枠の途中で終了
        (datetime(2026, 10, 1, tzinfo=UTC), datetime(2026, 10, 17, 2, 30, tzinfo=UTC)),
        # 枠より前に終了
        (datetime(2026, 10, 1, tzinfo=UTC), datetime(2026, 10, 2, tzinfo=UTC)),
        # 枠より後に開始
        (datetime(2026, 10, 18, tzinfo=UTC), datetime(2026, 11, 1, tzinfo=UTC)),
    ])
    def test_not_containing(self, starts_at, ends_at):
        assert is_active(_keyword(starts_at, ends_at), WINDOW) is False

    def test_mixed_timezones(self):
        jst = timezone(timedelta(hours=9))
        k = _keyword(datetime(2026, 10, 17, 11, 0, tzinfo=jst), datetime(2026, 10, 17, 12, 0, tzinfo=jst))
        assert is_active(k, WINDOW) is True


class TestSearchKeywordFromRow:
    """SearchKeyword.from_row のテスト."""

    def test_parse_row(self):
        k = SearchKeyword.from_row({
            "id": 7,
            "keyword": "猫",
            "starts_at": "2026-10-01T00:00:00+00:00",
            "ends_at": "2026-11-01T00:00:00+09:00",
            "created_at": "2026-09-30T12:00:00.123456+00:00",
        })

        assert k.id == 7
        assert k.keyword == "猫"
        assert k.starts_at == datetime(2026, 10, 1, tzinfo=UTC)
        assert k.ends_at == datetime(2026, 10, 31, 15, 0, tzinfo=UTC)
        assert k.created_at.microsecond == 123456

    def test_naive_timestamp_is_utc(self):
        k = SearchKeyword.from_row({
            "id": 1, "keyword": "kw",
            "starts_at": "2026-10-01T00:00:00", "ends_at": "2026-10-02T00:00:00",
            "created_at": None,
        })

        assert k.starts_at.tzinfo is UTC
        assert k.created_at is None


class TestTimestamps:

    def test_api_format(self):
        jst = timezone(timedelta(hours=9))
        assert to_api_timestamp(datetime(2026, 10, 17, 12, 0, tzinfo=jst)) == "2026-10-17T03:00:00.000Z"

    def test_milliseconds(self):
        dt = datetime(2026, 10, 17, 3, 0, 5, 42999, tzinfo=UTC)
        assert to_api_timestamp(dt) == "2026-10-17T03:00:05.042Z"

    def test_parse_z_suffix(self):
        assert parse_timestamp("2026-10-17T03:00:00Z") == datetime(2026, 10, 17, 3, 0, tzinfo=UTC)
