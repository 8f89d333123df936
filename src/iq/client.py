"""Governance server client for per-component policy-violation summaries.

Follows the same lightweight REST pattern as the comment client: every call
goes through the shared ``get_json`` helper and a missing or unusable answer
is reported as ``None`` rather than raised.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, safe_url
from graph.coordinates import ComponentIdentifier
from .models import ViolationSummary

logger = logging.getLogger(__name__)

ViolationLookup = Callable[[ComponentIdentifier], Optional[ViolationSummary]]


class IQClient:
    """REST client for the violation-summary endpoint.

    Supports optional HTTP basic authentication when both a username and a
    token are configured.
    """

    def __init__(
        self,
        base_url: str,
        application_id: Optional[str] = None,
        username: Optional[str] = None,
        token: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Server root, e.g. https://iq.example.com
            application_id: Optional application the evaluation is scoped to
            username: Optional user for basic auth
            token: Optional password or user token for basic auth
        """
        self.base_url = base_url.rstrip("/")
        self.application_id = application_id
        self.username = username
        self.token = token

    @property
    def summary_url(self) -> str:
        return f"{self.base_url}/{Constants.IQ_VIOLATION_SUMMARY_PATH}"

    def _get_auth(self):
        if self.username and self.token:
            return (self.username, self.token)
        return None

    def fetch_summary(self, identifier: ComponentIdentifier) -> Optional[ViolationSummary]:
        """Fetch the violation summary of one component.

        Args:
            identifier: Component to look up

        Returns:
            ViolationSummary, or None when the server gave no usable answer
        """
        params: Dict[str, str] = {"componentIdentifier": identifier.to_json()}
        if self.application_id:
            params["applicationId"] = self.application_id

        status, _, data = get_json(
            self.summary_url,
            headers={"Accept": "application/json"},
            params=params,
            auth=self._get_auth(),
        )

        if status == 200 and data is not None:
            return ViolationSummary.from_json(data)

        logger.warning(
            "No violation summary for %s",
            identifier,
            extra=extra_context(
                event="http_response",
                component="iq_client",
                action="fetch_summary",
                outcome="absent",
                status_code=status,
                target=safe_url(self.summary_url)
            )
        )
        return None


def _no_lookup(_identifier: ComponentIdentifier) -> Optional[ViolationSummary]:
    return None


def build_violation_lookup(
    base_url: Optional[str],
    application_id: Optional[str] = None,
    username: Optional[str] = None,
    token: Optional[str] = None,
) -> ViolationLookup:
    """Return the lookup callable used by the report builder.

    Without a server URL every lookup is absent, which the report treats
    as zero known violations.
    """
    if not base_url:
        logger.info("Governance server not configured; policy violations will not be reported.")
        return _no_lookup
    client = IQClient(base_url, application_id=application_id, username=username, token=token)
    return client.fetch_summary
