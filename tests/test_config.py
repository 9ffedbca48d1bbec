import logging

from routedoc.app import Application
from routedoc.config import AppConfig
from routedoc.diagnostics import CollectingSink, LoggingSink


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.environment == "development"
        assert config.debug is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ROUTEDOC_ENVIRONMENT", "production")
        monkeypatch.setenv("ROUTEDOC_DEBUG", "Yes")
        config = AppConfig.from_env()
        assert config.environment == "production"
        assert config.debug is True

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.delenv("ROUTEDOC_ENVIRONMENT", raising=False)
        monkeypatch.delenv("ROUTEDOC_DEBUG", raising=False)
        assert AppConfig.from_env() == AppConfig()


class TestSinks:
    def test_collecting_sink(self):
        sink = CollectingSink()
        sink.emit("warning", "careful", path="/x")
        assert sink.records[0].context == {"path": "/x"}
        assert sink.messages("warning") == ["careful"]
        assert sink.messages("error") == []

    def test_logging_sink_drops_debug_unless_enabled(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="routedoc"):
            LoggingSink(debug=False).emit("debug", "hidden detail")
            LoggingSink(debug=True).emit("debug", "shown detail")
            LoggingSink().emit("warning", "always shown", path="/x")
        messages = [r.getMessage() for r in caplog.records]
        assert "hidden detail" not in messages
        assert "shown detail" in messages
        assert "always shown {'path': '/x'}" in messages

    def test_application_uses_debug_flag(self):
        app = Application(config=AppConfig(debug=True))
        assert isinstance(app.sink, LoggingSink)
        assert app.sink.debug is True
