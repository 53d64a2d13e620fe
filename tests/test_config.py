import pytest

from remediation.config import ALL_ACTIONS, Settings
from remediation.errors import ConfigurationMissing


@pytest.fixture
def clean_env(monkeypatch):
    for name in [
        "JIRA_BASE",
        "JIRA_MAIL",
        "JIRA_API",
        "JIRA_PROJECT",
        "SLACK_WEBHOOK_URL",
        "CF_ZONE_ID",
        "CF_API_TOKEN",
        "CF_API_BASE",
        "PORT",
        "HOST",
        "LOG_LEVEL",
        "REMEDIATION_ENABLED_ACTIONS",
        "REMEDIATION_SIMULATION_MODE",
        "REMEDIATION_STRICT_CONFIG",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_from_empty_environment(clean_env):
    settings = Settings.from_env()

    assert settings.port == 3000
    assert settings.cloudflare_api_base == "https://api.cloudflare.com/client/v4"
    assert settings.enabled_actions == ALL_ACTIONS
    assert settings.simulation_mode is False
    assert settings.strict_config is True
    assert settings.jira_missing() == ["JIRA_BASE", "JIRA_MAIL", "JIRA_API", "JIRA_PROJECT"]


def test_reads_environment(clean_env):
    clean_env.setenv("JIRA_BASE", "https://jira.example.com")
    clean_env.setenv("JIRA_API", "token-value")
    clean_env.setenv("CF_ZONE_ID", "")
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("REMEDIATION_ENABLED_ACTIONS", "block_ip, alert_sre")
    clean_env.setenv("REMEDIATION_SIMULATION_MODE", "yes")

    settings = Settings.from_env()

    assert settings.jira_base_url == "https://jira.example.com"
    assert settings.jira_api_token.get_secret_value() == "token-value"
    # Empty variables count as missing.
    assert settings.cloudflare_zone_id is None
    assert settings.port == 8080
    assert settings.enabled_actions == frozenset({"block_ip", "alert_sre"})
    assert settings.simulation_mode is True


def test_secrets_do_not_render(clean_env):
    clean_env.setenv("CF_API_TOKEN", "very-secret")
    clean_env.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.example.com/secret-path")

    settings = Settings.from_env()

    assert "very-secret" not in repr(settings)
    assert "secret-path" not in str(settings)


def test_check_required_only_covers_enabled_actions():
    settings = Settings(slack_webhook_url="https://hooks.example.com/x", enabled_actions=frozenset({"alert_sre"}))

    settings.check_required()


def test_check_required_names_missing_variables():
    settings = Settings(slack_webhook_url="https://hooks.example.com/x")

    with pytest.raises(ConfigurationMissing) as excinfo:
        settings.check_required()

    assert excinfo.value.missing == sorted(
        ["CF_API_TOKEN", "CF_ZONE_ID", "JIRA_API", "JIRA_BASE", "JIRA_MAIL", "JIRA_PROJECT"]
    )
    assert set(settings.missing_for_enabled_actions()) == {
        "block_ip",
        "rate_limit_ip",
        "add_waf_rule",
        "block_endpoint",
    }


def test_simulation_mode_lifts_firewall_requirement():
    settings = Settings(
        slack_webhook_url="https://hooks.example.com/x",
        simulation_mode=True,
        enabled_actions=frozenset({"block_ip", "alert_sre"}),
    )

    assert settings.missing_for_enabled_actions() == {}
