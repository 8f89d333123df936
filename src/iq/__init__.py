"""Governance server (policy violation) support.

- models.py: severity bands, alerts and the per-component summary
- client.py: HTTP lookup of a summary for one component identifier
"""

from .models import Alert, ConditionFact, Severity, ViolationSummary  # noqa: F401
from .client import IQClient, ViolationLookup, build_violation_lookup  # noqa: F401

__all__ = [
    "Alert",
    "ConditionFact",
    "Severity",
    "ViolationSummary",
    "IQClient",
    "ViolationLookup",
    "build_violation_lookup",
]
