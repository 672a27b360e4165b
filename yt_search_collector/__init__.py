"""YouTube キーワード検索結果の定期収集."""
