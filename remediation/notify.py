from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from .base import RemediationClient
from .models import RemediationRequest
from .utils import post_json, utc_now_iso


logger = logging.getLogger(__name__)

ALERT_HEADER = "🚨 *Security Alert – ThreatPilot*"


def _mrkdwn_section(text: str) -> Dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def build_alert_message(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Build the Slack block message for an SRE alert.

    Missing fields fall back to "Unknown" (threat), "Medium" (severity) and
    "N/A" (target). The recommended action is rendered as given.
    """

    threat = payload.get("threat") or "Unknown"
    severity = payload.get("severity") or "Medium"
    target = payload.get("target") or "N/A"
    action = payload.get("action")

    return {
        "text": ALERT_HEADER,
        "blocks": [
            _mrkdwn_section(f"*Threat:* {threat}\n*Severity:* {severity}"),
            _mrkdwn_section(f"*Target:* {target}\n*Recommended Action:* {action}"),
            {
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": f"⏱ {utc_now_iso()}"}],
            },
        ],
    }


class SlackNotificationClient(RemediationClient):
    """Posts SRE alerts to a Slack incoming webhook.

    Success predicate: the POST completes at the transport level. Unlike
    the firewall and ticketing clients, neither the status code nor the
    body is checked; a non-2xx answer is only logged at debug level.
    """

    service = "slack"
    missing_message = "Slack webhook not configured"

    def missing_config(self) -> List[str]:
        return self.settings.slack_missing()

    def execute(self, request: RemediationRequest) -> None:
        self.check_config()

        resp = post_json(
            self.session,
            self.settings.slack_webhook_url.get_secret_value(),
            build_alert_message(request.raw_payload()),
            service=self.service,
        )
        if not resp.ok:
            logger.debug("Slack webhook answered HTTP %s", resp.status_code)
        return None
