import pytest
from fastapi.testclient import TestClient

from fakes import FakeSession
from remediation.app import create_app
from remediation.config import Settings
from remediation.executor import RemediationDispatcher


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jira_base_url="https://jira.example.com",
        jira_email="bot@example.com",
        jira_api_token="jira-secret-token",
        jira_project_key="SEC",
        slack_webhook_url="https://hooks.slack.example.com/services/T000/B000/XXX",
        cloudflare_zone_id="zone-abc",
        cloudflare_api_token="cf-secret-token",
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def make_client(session: FakeSession):
    """Build a TestClient whose clients all talk to the fake session."""

    def _make(settings: Settings) -> TestClient:
        return TestClient(create_app(settings, RemediationDispatcher(settings, session=session)))

    return _make


@pytest.fixture
def client(make_client, settings: Settings) -> TestClient:
    return make_client(settings)
