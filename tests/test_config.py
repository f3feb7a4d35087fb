from feed_articles.config import Settings, __version__


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("FEED_TIMEOUT", "FEED_USER_AGENT", "FEED_FOLLOW_REDIRECTS", "FEED_MAX_CONCURRENCY", "FEED_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        s = Settings.from_env()
        assert s.timeout == 30.0
        assert s.user_agent == f"feed-articles/{__version__}"
        assert s.follow_redirects is True
        assert s.max_concurrency is None
        assert s.log_level == "INFO"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FEED_TIMEOUT", "5")
        monkeypatch.setenv("FEED_USER_AGENT", "my-reader/2.0")
        monkeypatch.setenv("FEED_FOLLOW_REDIRECTS", "no")
        monkeypatch.setenv("FEED_MAX_CONCURRENCY", "4")
        monkeypatch.setenv("FEED_LOG_LEVEL", "debug")
        s = Settings.from_env()
        assert s.timeout == 5.0
        assert s.user_agent == "my-reader/2.0"
        assert s.follow_redirects is False
        assert s.max_concurrency == 4
        assert s.log_level == "DEBUG"

    def test_zero_concurrency_is_unbounded(self, monkeypatch):
        monkeypatch.setenv("FEED_MAX_CONCURRENCY", "0")
        assert Settings.from_env().max_concurrency is None

    def test_malformed_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("FEED_TIMEOUT", "soon")
        monkeypatch.setenv("FEED_MAX_CONCURRENCY", "lots")
        s = Settings.from_env()
        assert s.timeout == 30.0
        assert s.max_concurrency is None

    def test_non_positive_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv("FEED_TIMEOUT", "-1")
        assert Settings.from_env().timeout == 30.0

    def test_unknown_log_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("FEED_LOG_LEVEL", "bogus")
        assert Settings.from_env().log_level == "INFO"

    def test_nan_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv("FEED_TIMEOUT", "nan")
        assert Settings.from_env().timeout == 30.0
