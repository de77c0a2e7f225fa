"""Tests for engine settings."""

from nested_rules.config import Settings, get_settings
from nested_rules.core.rules.engine import RuleEngine


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """Should default to tracing with the 'default' fallback key."""
        settings = Settings(_env_file=None)

        assert settings.default_key == "default"
        assert settings.trace_enabled is True
        assert settings.settle_awaitables is True

    def test_reads_prefixed_environment(self, monkeypatch):
        """Should load NESTED_RULES_* environment variables."""
        monkeypatch.setenv("NESTED_RULES_DEFAULT_KEY", "otherwise")
        monkeypatch.setenv("NESTED_RULES_TRACE_ENABLED", "false")

        settings = Settings(_env_file=None)

        assert settings.default_key == "otherwise"
        assert settings.trace_enabled is False

    def test_get_settings_is_cached(self):
        """Should return the same instance on repeated calls."""
        assert get_settings() is get_settings()

    def test_engine_uses_configured_default_key(self, monkeypatch):
        """Should compile rules with the configured fallback key."""
        monkeypatch.setenv("NESTED_RULES_DEFAULT_KEY", "otherwise")
        settings = Settings(_env_file=None)
        functions = {"is_a": lambda _: False, "a": lambda _: "a", "b": lambda _: "b"}

        engine = RuleEngine(functions, {"is_a": "a", "otherwise": "b"}, settings=settings)
        outcome = engine.evaluate({})

        assert outcome.result == "b"
        assert outcome.logs[0].selected == "otherwise"
        assert outcome.logs[0].fallback is True
