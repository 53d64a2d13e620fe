from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class RemediationRequest(BaseModel):
    """Request body for /execute.

    Only `action` is checked. `target` is forwarded as-is and any extra
    fields (e.g. `threat` for alert_sre) are kept.
    """

    model_config = ConfigDict(extra="allow")

    action: Any = None
    target: Any = None
    severity: Any = "medium"

    def raw_payload(self) -> Dict[str, Any]:
        """The fields exactly as sent by the caller, without defaults."""

        return self.model_dump(exclude_unset=True)


class RemediationResult(BaseModel):
    """Outcome of one /execute call.

    A single model covers every response shape; fields that do not apply to
    a shape stay None and are dropped when serialized.
    """

    status: str  # success | pending_approval | ignored | error
    action_taken: Optional[str] = None
    action: Optional[str] = None
    target: Any = None
    method: Optional[str] = None
    cloudflare_rule_id: Optional[str] = None
    jira_ticket: Optional[str] = None
    message: Optional[str] = None
    executed_at: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        body = self.model_dump(exclude_none=True)
        # `target` is echoed back even when the caller sent null.
        if self.status in {"success", "pending_approval"} and self.action_taken != "alert_sre":
            body.setdefault("target", self.target)
        return body
