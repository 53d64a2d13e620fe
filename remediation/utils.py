from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from .errors import TransportFailure


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def post_json(
    session: Any,
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    service: str = "upstream",
) -> requests.Response:
    """POST a JSON body and return the response untouched.

    Network-level failures are re-raised as TransportFailure carrying the
    raw error text. No timeout is set, so the transport default applies.
    """

    all_headers = {"Content-Type": "application/json"}
    all_headers.update(headers or {})

    try:
        return session.post(url, json=payload, headers=all_headers)
    except requests.RequestException as exc:
        raise TransportFailure(str(exc), {"service": service}) from exc


def response_json(resp: requests.Response) -> Dict[str, Any]:
    """Decode a JSON object body, falling back to the raw text."""

    try:
        data = resp.json()
    except ValueError:
        return {"raw": resp.text}
    return data if isinstance(data, dict) else {"raw": data}
