from __future__ import annotations

import os
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, SecretStr

from .errors import ConfigurationMissing


BLOCK_ACTION = "block_ip"
APPROVAL_ACTIONS: FrozenSet[str] = frozenset({"rate_limit_ip", "add_waf_rule", "block_endpoint"})
ALERT_ACTION = "alert_sre"
ALL_ACTIONS: FrozenSet[str] = frozenset({BLOCK_ACTION, ALERT_ACTION} | APPROVAL_ACTIONS)

CLOUDFLARE_API_BASE = "https://api.cloudflare.com/client/v4"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_str(name: str) -> Optional[str]:
    # Empty values count as unset.
    value = os.getenv(name)
    return value or None


def _env_secret(name: str) -> Optional[SecretStr]:
    value = _env_str(name)
    return SecretStr(value) if value is not None else None


def _parse_actions(raw: Optional[str]) -> FrozenSet[str]:
    if not raw:
        return ALL_ACTIONS
    return frozenset(a.strip() for a in raw.split(",") if a.strip())


class Settings(BaseModel):
    """Process configuration, built once at startup and shared read-only."""

    model_config = ConfigDict(frozen=True)

    jira_base_url: Optional[str] = None
    jira_email: Optional[str] = None
    jira_api_token: Optional[SecretStr] = None
    jira_project_key: Optional[str] = None

    slack_webhook_url: Optional[SecretStr] = None

    cloudflare_zone_id: Optional[str] = None
    cloudflare_api_token: Optional[SecretStr] = None
    cloudflare_api_base: str = CLOUDFLARE_API_BASE

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    enabled_actions: FrozenSet[str] = ALL_ACTIONS
    simulation_mode: bool = False
    strict_config: bool = True

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            jira_base_url=_env_str("JIRA_BASE"),
            jira_email=_env_str("JIRA_MAIL"),
            jira_api_token=_env_secret("JIRA_API"),
            jira_project_key=_env_str("JIRA_PROJECT"),
            slack_webhook_url=_env_secret("SLACK_WEBHOOK_URL"),
            cloudflare_zone_id=_env_str("CF_ZONE_ID"),
            cloudflare_api_token=_env_secret("CF_API_TOKEN"),
            cloudflare_api_base=os.getenv("CF_API_BASE", CLOUDFLARE_API_BASE),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            enabled_actions=_parse_actions(os.getenv("REMEDIATION_ENABLED_ACTIONS")),
            simulation_mode=_env_flag("REMEDIATION_SIMULATION_MODE", "false"),
            strict_config=_env_flag("REMEDIATION_STRICT_CONFIG", "true"),
        )

    def jira_missing(self) -> List[str]:
        required = {
            "JIRA_BASE": self.jira_base_url,
            "JIRA_MAIL": self.jira_email,
            "JIRA_API": self.jira_api_token,
            "JIRA_PROJECT": self.jira_project_key,
        }
        return [name for name, value in required.items() if not value]

    def slack_missing(self) -> List[str]:
        return [] if self.slack_webhook_url else ["SLACK_WEBHOOK_URL"]

    def cloudflare_missing(self) -> List[str]:
        required = {
            "CF_ZONE_ID": self.cloudflare_zone_id,
            "CF_API_TOKEN": self.cloudflare_api_token,
        }
        return [name for name, value in required.items() if not value]

    def missing_for_enabled_actions(self) -> Dict[str, List[str]]:
        """Map each enabled action to the variables it still lacks."""

        missing: Dict[str, List[str]] = {}
        for action in sorted(self.enabled_actions & ALL_ACTIONS):
            if action == BLOCK_ACTION:
                lacking = [] if self.simulation_mode else self.cloudflare_missing()
            elif action in APPROVAL_ACTIONS:
                lacking = self.jira_missing()
            else:
                lacking = self.slack_missing()
            if lacking:
                missing[action] = lacking
        return missing

    def check_required(self) -> None:
        """Raise ConfigurationMissing if an enabled action cannot run."""

        missing = self.missing_for_enabled_actions()
        if not missing:
            return
        names = sorted({name for names in missing.values() for name in names})
        raise ConfigurationMissing(
            f"Missing configuration for enabled actions {sorted(missing)}: {', '.join(names)}",
            names,
        )
