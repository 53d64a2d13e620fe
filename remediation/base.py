from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

import requests

from .config import Settings
from .errors import ConfigurationMissing
from .models import RemediationRequest


class RemediationClient(ABC):
    """One remote system that can carry out a remediation request.

    `execute` performs exactly one outbound call and returns the remote
    handle (rule id, ticket key) or None when the remote system returns
    none. Expected failures are raised as RemediationError subclasses.
    Each implementation documents its own success predicate.
    """

    service: str = ""
    missing_message: str = "Configuration missing"

    def __init__(self, settings: Settings, session: Any = None) -> None:
        self.settings = settings
        # requests.Session-compatible; the requests module itself by default.
        self.session = session if session is not None else requests

    @abstractmethod
    def missing_config(self) -> List[str]:
        """Names of the environment variables this client still lacks."""
        raise NotImplementedError

    def check_config(self) -> None:
        missing = self.missing_config()
        if missing:
            raise ConfigurationMissing(f"{self.missing_message}: {', '.join(missing)}", missing)

    @abstractmethod
    def execute(self, request: RemediationRequest) -> Optional[str]:
        raise NotImplementedError
