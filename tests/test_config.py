"""Environment-driven settings and logging setup."""

import logging

from tutor_onboarding.config import OnboardingSettings, configure_logging, load_settings


def test_defaults(monkeypatch):
    """Without ONBOARDING_* variables the local defaults apply."""
    for name in ("ONBOARDING_RULESET_DIR", "ONBOARDING_LOG_LEVEL",
                 "ONBOARDING_INSPECTOR_HOST", "ONBOARDING_INSPECTOR_PORT"):
        monkeypatch.delenv(name, raising=False)
    assert load_settings() == OnboardingSettings()


def test_env_overrides(monkeypatch, tmp_path):
    """Every setting can be overridden from the environment."""
    monkeypatch.setenv("ONBOARDING_RULESET_DIR", str(tmp_path))
    monkeypatch.setenv("ONBOARDING_LOG_LEVEL", "debug")
    monkeypatch.setenv("ONBOARDING_INSPECTOR_HOST", "0.0.0.0")
    monkeypatch.setenv("ONBOARDING_INSPECTOR_PORT", "9001")
    s = load_settings()
    assert s.ruleset_dir == str(tmp_path)
    assert s.log_level == "DEBUG"
    assert s.inspector_host == "0.0.0.0"
    assert s.inspector_port == 9001


def test_empty_ruleset_dir_means_packaged(monkeypatch):
    """An empty ONBOARDING_RULESET_DIR falls back to the packaged tables."""
    monkeypatch.setenv("ONBOARDING_RULESET_DIR", "")
    assert load_settings().ruleset_dir is None


def test_configure_logging_sets_level(monkeypatch):
    """configure_logging applies the configured level to the root logger."""
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    configure_logging(OnboardingSettings(log_level="WARNING"))
    assert calls["level"] == logging.WARNING
    assert "%(name)s" in calls["format"]
