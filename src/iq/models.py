"""Policy-violation summary returned by the governance server."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class Severity(Enum):
    """Severity band of a policy threat level (0-10)."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_threat_level(cls, level: int) -> "Severity":
        if level >= 8:
            return cls.CRITICAL
        if level >= 4:
            return cls.HIGH
        if level >= 2:
            return cls.MEDIUM
        return cls.LOW


@dataclass
class ConditionFact:
    summary: str
    reason: str


@dataclass
class Alert:
    """One policy alert; constraint_facts maps constraint name to its conditions."""
    threat_level: int
    policy_name: str
    constraint_facts: Dict[str, List[ConditionFact]] = field(default_factory=dict)

    @property
    def severity(self) -> Severity:
        return Severity.from_threat_level(self.threat_level)

    def reasons(self) -> List[str]:
        """Flattened, de-duplicated condition reasons in server order."""
        seen: List[str] = []
        for conditions in self.constraint_facts.values():
            for condition in conditions:
                text = condition.reason or condition.summary
                if text and text not in seen:
                    seen.append(text)
        return seen

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Alert":
        """Build an alert from an IQ ``alerts[]`` entry.

        The interesting data sits under ``trigger``; older payloads put it
        at the top level, so both are accepted.
        """
        trigger = data.get("trigger") or data
        constraint_facts: Dict[str, List[ConditionFact]] = {}
        for component_fact in trigger.get("componentFacts") or []:
            for constraint in component_fact.get("constraintFacts") or []:
                name = constraint.get("constraintName") or "unnamed constraint"
                conditions = constraint_facts.setdefault(name, [])
                for condition in constraint.get("conditionFacts") or []:
                    conditions.append(
                        ConditionFact(
                            summary=condition.get("summary") or "",
                            reason=condition.get("reason") or "",
                        )
                    )
        try:
            threat_level = int(trigger.get("threatLevel", 0))
        except (TypeError, ValueError):
            threat_level = 0
        return cls(
            threat_level=threat_level,
            policy_name=trigger.get("policyName") or "unknown policy",
            constraint_facts=constraint_facts,
        )


@dataclass
class ViolationSummary:
    alerts: List[Alert] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "ViolationSummary":
        if not isinstance(data, dict):
            return cls()
        alerts = [
            Alert.from_json(entry)
            for entry in data.get("alerts") or []
            if isinstance(entry, dict)
        ]
        return cls(alerts=alerts)

    @property
    def is_empty(self) -> bool:
        return not self.alerts

    @property
    def max_threat_level(self) -> int:
        return max((alert.threat_level for alert in self.alerts), default=0)

    def counts(self) -> Dict[Severity, int]:
        """Number of alerts per severity band; every band is present."""
        result = {severity: 0 for severity in Severity}
        for alert in self.alerts:
            result[alert.severity] += 1
        return result
