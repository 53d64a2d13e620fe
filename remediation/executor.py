from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .base import RemediationClient
from .config import ALERT_ACTION, ALL_ACTIONS, APPROVAL_ACTIONS, BLOCK_ACTION, Settings
from .errors import InvalidRequest, RemediationError, UnsupportedAction
from .firewall import CloudflareFirewallClient
from .models import RemediationRequest, RemediationResult
from .notify import SlackNotificationClient
from .ticketing import JiraTicketClient
from .utils import utc_now_iso


logger = logging.getLogger(__name__)


class RemediationDispatcher:
    """Routes a remediation request to exactly one remote system.

    block_ip goes to the firewall, the approval-gated actions become tickets
    and alert_sre becomes a chat notification. Every request produces one
    result or raises one RemediationError; nothing is retried or rolled
    back.
    """

    def __init__(
        self,
        settings: Settings,
        firewall: Optional[RemediationClient] = None,
        ticketing: Optional[RemediationClient] = None,
        notifier: Optional[RemediationClient] = None,
        session: Any = None,
    ) -> None:
        self.settings = settings
        self.firewall = firewall or CloudflareFirewallClient(settings, session=session)
        self.ticketing = ticketing or JiraTicketClient(settings, session=session)
        self.notifier = notifier or SlackNotificationClient(settings, session=session)

    def is_enabled(self, action: Any) -> bool:
        if not isinstance(action, str):
            return False
        return action in ALL_ACTIONS and action in self.settings.enabled_actions

    def execute(self, req: RemediationRequest) -> RemediationResult:
        if not req.action:
            raise InvalidRequest("Action is required")

        action = req.action
        if not self.is_enabled(action):
            raise UnsupportedAction(action)

        try:
            if action == BLOCK_ACTION:
                return self._block_ip(req)
            if action in APPROVAL_ACTIONS:
                return self._open_ticket(req)
            return self._alert_sre(req)
        except RemediationError as exc:
            logger.error(
                "Remediation error (%s) for action %s: %s %s",
                exc.kind.value,
                action,
                exc.message,
                exc.context,
            )
            raise
        except Exception:
            logger.exception("Remediation error for action %s", action)
            raise

    def _block_ip(self, req: RemediationRequest) -> RemediationResult:
        if self.settings.simulation_mode:
            return RemediationResult(
                status="success",
                action_taken=BLOCK_ACTION,
                target=req.target,
                method="firewall_simulation",
                message=f"IP {req.target} blocked",
                executed_at=utc_now_iso(),
            )

        rule_id = self.firewall.execute(req)
        return RemediationResult(
            status="success",
            action_taken=BLOCK_ACTION,
            target=req.target,
            method="cloudflare_firewall",
            cloudflare_rule_id=rule_id,
            message=f"IP {req.target} blocked via Cloudflare",
            executed_at=utc_now_iso(),
        )

    def _open_ticket(self, req: RemediationRequest) -> RemediationResult:
        ticket_key = self.ticketing.execute(req)
        return RemediationResult(
            status="pending_approval",
            action=req.action,
            target=req.target,
            jira_ticket=ticket_key,
        )

    def _alert_sre(self, req: RemediationRequest) -> RemediationResult:
        self.notifier.execute(req)
        return RemediationResult(
            status="success",
            action_taken=ALERT_ACTION,
            method="slack_notification",
            message="SRE alerted via Slack",
            executed_at=utc_now_iso(),
        )


def error_body(exc: RemediationError) -> Dict[str, Any]:
    return RemediationResult(status=exc.result_status, message=exc.message).to_body()
