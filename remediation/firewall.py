from __future__ import annotations

import logging
from typing import Any, Dict, List

from .base import RemediationClient
from .errors import RemoteRejected
from .models import RemediationRequest
from .utils import post_json, response_json


logger = logging.getLogger(__name__)

BLOCK_NOTE = "ThreatPilot automated remediation"


def build_block_rule(target: Any) -> Dict[str, Any]:
    # The target is forwarded without checking that it is an IP address.
    return {
        "mode": "block",
        "configuration": {"target": "ip", "value": target},
        "notes": BLOCK_NOTE,
    }


class CloudflareFirewallClient(RemediationClient):
    """Creates IP block access rules in a Cloudflare zone.

    Success predicate: the response body's `success` flag is true. The HTTP
    status code is not consulted; Cloudflare reports failures in the body.
    """

    service = "cloudflare"
    missing_message = "Cloudflare env vars missing"

    def missing_config(self) -> List[str]:
        return self.settings.cloudflare_missing()

    def rules_url(self) -> str:
        base = self.settings.cloudflare_api_base.rstrip("/")
        return f"{base}/zones/{self.settings.cloudflare_zone_id}/firewall/access_rules/rules"

    def execute(self, request: RemediationRequest) -> str:
        self.check_config()

        token = self.settings.cloudflare_api_token.get_secret_value()
        resp = post_json(
            self.session,
            self.rules_url(),
            build_block_rule(request.target),
            headers={"Authorization": f"Bearer {token}"},
            service=self.service,
        )
        data = response_json(resp)

        if data.get("success") is not True:
            logger.error("Cloudflare error: %s", data)
            errors = data.get("errors") or []
            message = "Cloudflare block failed"
            if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("message"):
                message = str(errors[0]["message"])
            raise RemoteRejected(message, {"service": self.service, "http_status": resp.status_code})

        result = data.get("result")
        if not isinstance(result, dict) or result.get("id") is None:
            logger.error("Cloudflare response without rule id: %s", data)
            raise RemoteRejected("Cloudflare response did not include a rule id", {"service": self.service})
        return str(result["id"])
