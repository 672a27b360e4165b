"""例外定義."""


class CollectorError(Exception):
    """収集処理の基底例外."""


class ConfigError(CollectorError):
    """必須の設定値が欠けている."""


class FetchError(CollectorError):
    """検索 API の呼び出し・レスポンス解析に失敗した."""


class AuthError(CollectorError):
    """Supabase の認証に失敗した."""


class WriteError(CollectorError):
    """search_result への書き込みに失敗した."""
