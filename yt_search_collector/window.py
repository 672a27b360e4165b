"""検索対象の時間枠の計算."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from yt_search_collector.models import TimeWindow

logger = logging.getLogger(__name__)

_LOCALTIME_FILE = Path("/etc/localtime")


def local_timezone() -> tzinfo:
    """プロセスのローカルタイムゾーンを夏時間の規則付きで返す.

    TZ 環境変数、/etc/localtime の順に解決する。どちらも使えない場合のみ
    現在の固定オフセットになる (この場合は経過時間基準の計算になる)。
    """
    name = os.environ.get("TZ", "").lstrip(":")
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("TZ を解決できません: %s", name)

    if _LOCALTIME_FILE.is_file():
        try:
            with _LOCALTIME_FILE.open("rb") as f:
                return ZoneInfo.from_file(f, key="localtime")
        except (OSError, ValueError) as e:
            logger.warning("%s を読み込めません: %s", _LOCALTIME_FILE, e)

    return datetime.now().astimezone().tzinfo


def compute_window(now: datetime | None = None, tz: tzinfo | None = None) -> TimeWindow:
    """直前の 1 時間枠 (前の正時 〜 現在の正時) を計算する.

    正時への切り捨てはローカル (tz 指定時はそのタイムゾーン) の暦で行う。
    同一 tzinfo 同士の datetime 演算は壁時計基準なので、夏時間の切り替え時は
    経過時間ではなく壁時計の正時がずれる (UTC 上の幅は 0 〜 2 時間)。

    Args:
        now: 基準時刻。None なら現在時刻。naive な値は切り捨てに使う
            タイムゾーンの壁時計として扱う。aware な値は tz 指定時のみ変換する。
        tz: 切り捨てに使うタイムゾーン。None ならローカルタイム。
    """
    if tz is None and (now is None or now.tzinfo is None):
        tz = local_timezone()

    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    elif tz is not None:
        now = now.astimezone(tz)

    before = now.replace(minute=0, second=0, microsecond=0)
    after = before - timedelta(hours=1)
    return TimeWindow(after=after, before=before)
