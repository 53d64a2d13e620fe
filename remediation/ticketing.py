from __future__ import annotations

import base64
import json
import logging
from typing import Any, Dict, List

from .base import RemediationClient
from .errors import RemoteRejected
from .models import RemediationRequest
from .utils import post_json, response_json


logger = logging.getLogger(__name__)

TICKET_LABELS = ["threatpilot", "automated"]
ISSUE_TYPE = "Task"


def priority_for(severity: Any) -> str:
    return "High" if severity == "high" else "Medium"


def build_summary(action: str) -> str:
    return f"[ThreatPilot] {action.replace('_', ' ').upper()}"


def build_description(action: str, target: Any, severity: Any) -> str:
    return f"Action: {action}\nTarget: {json.dumps(target, indent=2, ensure_ascii=False)}\nSeverity: {severity}"


def basic_auth_header(email: str, token: str) -> str:
    encoded = base64.b64encode(f"{email}:{token}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


class JiraTicketClient(RemediationClient):
    """Files a Jira task for actions that need a human to sign off.

    rate_limit_ip, add_waf_rule and block_endpoint always land here, never
    executed directly, whatever their severity.

    Success predicate: a 2xx response carrying the created issue's `key`.
    """

    service = "jira"
    missing_message = "Jira environment variables missing"

    def missing_config(self) -> List[str]:
        return self.settings.jira_missing()

    def build_issue(self, request: RemediationRequest) -> Dict[str, Any]:
        action = request.action or ""
        return {
            "fields": {
                "project": {"key": self.settings.jira_project_key},
                "summary": build_summary(action),
                "description": build_description(action, request.target, request.severity),
                "issuetype": {"name": ISSUE_TYPE},
                "priority": {"name": priority_for(request.severity)},
                "labels": list(TICKET_LABELS),
            }
        }

    def execute(self, request: RemediationRequest) -> str:
        self.check_config()

        settings = self.settings
        auth = basic_auth_header(settings.jira_email, settings.jira_api_token.get_secret_value())
        resp = post_json(
            self.session,
            f"{settings.jira_base_url.rstrip('/')}/rest/api/3/issue",
            self.build_issue(request),
            headers={"Authorization": auth},
            service=self.service,
        )
        data = response_json(resp)

        if not resp.ok:
            logger.error("Jira error: %s", data)
            raise RemoteRejected(
                "Failed to create Jira ticket",
                {"service": self.service, "http_status": resp.status_code},
            )

        key = data.get("key")
        if not key:
            logger.error("Jira response without issue key: %s", data)
            raise RemoteRejected("Jira response did not include an issue key", {"service": self.service})
        return str(key)
