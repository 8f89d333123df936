"""Markdown rendering of a dependency diff for a pull-request comment.

Rendering is split in two steps. ``collect_findings`` attaches violation
summaries to every node of the diff (direct and transitive). The second step,
``render_markdown``, only formats. Keeping them apart lets tests check the
collected data without parsing Markdown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from constants import Constants
from graph.models import DependencyDiff, DependencyNode
from iq.client import ViolationLookup
from iq.models import Severity, ViolationSummary

logger = logging.getLogger(__name__)

SEVERITY_ORDER = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW]
_DETAILED_SEVERITIES = {Severity.CRITICAL, Severity.HIGH}


@dataclass
class Finding:
    """A node together with its (possibly absent) violation summary."""
    node: DependencyNode
    summary: Optional[ViolationSummary] = None

    def counts(self) -> Dict[Severity, int]:
        if self.summary is None:
            return {severity: 0 for severity in Severity}
        return self.summary.counts()

    @property
    def max_threat_level(self) -> int:
        return self.summary.max_threat_level if self.summary else 0

    @property
    def has_violations(self) -> bool:
        return self.summary is not None and not self.summary.is_empty


@dataclass
class ReportEntry:
    """One row of a report section; ``previous`` is set for upgrades only."""
    finding: Finding
    transitives: List[Finding] = field(default_factory=list)
    previous: Optional[Finding] = None

    def all_findings(self) -> List[Finding]:
        return [self.finding] + self.transitives


@dataclass
class ReportData:
    introduced: List[ReportEntry] = field(default_factory=list)
    removed: List[ReportEntry] = field(default_factory=list)
    upgraded: List[ReportEntry] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.introduced or self.removed or self.upgraded)

    def totals(self) -> Dict[Severity, int]:
        """Alerts per severity carried into the build (introduced and upgraded)."""
        result = {severity: 0 for severity in Severity}
        for entry in self.introduced + self.upgraded:
            for finding in entry.all_findings():
                for severity, count in finding.counts().items():
                    result[severity] += count
        return result

    @property
    def has_critical(self) -> bool:
        return self.totals()[Severity.CRITICAL] > 0


def collect_findings(diff: DependencyDiff, lookup: ViolationLookup) -> ReportData:
    """Look up violation summaries for every node of ``diff``.

    Each component identity is looked up at most once per call. An absent
    summary counts as zero findings.
    """
    memo: Dict[str, Optional[ViolationSummary]] = {}

    def find(node: DependencyNode) -> Finding:
        ident = node.identifier.identity
        if ident not in memo:
            memo[ident] = lookup(node.identifier)
        return Finding(node=node, summary=memo[ident])

    def entry_for(node: DependencyNode, previous: Optional[DependencyNode] = None) -> ReportEntry:
        return ReportEntry(
            finding=find(node),
            transitives=[find(child) for child in node.descendants()],
            previous=find(previous) if previous is not None else None,
        )

    report = ReportData(
        introduced=[entry_for(node) for node in diff.introduced],
        removed=[entry_for(node) for node in diff.removed],
        upgraded=[entry_for(up.to_node, previous=up.from_node) for up in diff.upgraded],
    )
    logger.debug("Collected findings for %d components", len(memo))
    return report


def _component(node: DependencyNode) -> str:
    group = node.identifier.get("groupId") or ""
    label = f"{group}:{node.name}" if group else str(node.name)
    classifier = node.identifier.get("classifier")
    if classifier:
        label = f"{label}:{classifier}"
    return f"`{label}`"


def _count_cells(finding: Finding) -> str:
    counts = finding.counts()
    return " | ".join(str(counts[severity]) for severity in SEVERITY_ORDER)


def _by_severity(entries: List[ReportEntry]) -> List[ReportEntry]:
    return sorted(entries, key=lambda entry: -entry.finding.max_threat_level)


def _violation_details(finding: Finding) -> List[str]:
    if not finding.summary:
        return []
    alerts = [a for a in finding.summary.alerts if a.severity in _DETAILED_SEVERITIES]
    if not alerts:
        return []
    alerts.sort(key=lambda a: -a.threat_level)
    lines = [
        "<details>",
        f"<summary>Policy violations in {finding.node.name} {finding.node.version}</summary>",
        "",
    ]
    for alert in alerts:
        reasons = "; ".join(alert.reasons()) or "no reason given"
        lines.append(f"- **{alert.policy_name}** (threat {alert.threat_level}): {reasons}")
    lines.extend(["", "</details>", ""])
    return lines


def _transitive_details(entry: ReportEntry) -> List[str]:
    flagged = [f for f in entry.transitives if f.has_violations]
    if not flagged:
        return []
    flagged.sort(key=lambda f: -f.max_threat_level)
    node = entry.finding.node
    lines = [
        "<details>",
        f"<summary>{len(entry.transitives)} transitive dependencies of {node.name} "
        f"{node.version} ({len(flagged)} with violations)</summary>",
        "",
        "| Component | Version | Critical | High | Medium | Low |",
        "|---|---|---|---|---|---|",
    ]
    for finding in flagged:
        lines.append(
            f"| {_component(finding.node)} | {finding.node.version} | {_count_cells(finding)} |"
        )
    lines.extend(["", "</details>", ""])
    return lines


def _render_section(title: str, entries: List[ReportEntry]) -> List[str]:
    lines = [
        f"### {title} ({len(entries)})",
        "",
        "| Component | Version | Relationship | Scope | Critical | High | Medium | Low |",
        "|---|---|---|---|---|---|---|---|",
    ]
    ordered = _by_severity(entries)
    for entry in ordered:
        node = entry.finding.node
        lines.append(
            f"| {_component(node)} | {node.version} | {node.relationship.value} "
            f"| {node.scope or ''} | {_count_cells(entry.finding)} |"
        )
    lines.append("")
    for entry in ordered:
        lines.extend(_violation_details(entry.finding))
        lines.extend(_transitive_details(entry))
    return lines


def _render_upgrades(entries: List[ReportEntry]) -> List[str]:
    lines = [
        f"### Upgraded ({len(entries)})",
        "",
        "| Component | From | To | Relationship | Critical | High | Medium | Low |",
        "|---|---|---|---|---|---|---|---|",
    ]
    ordered = _by_severity(entries)
    for entry in ordered:
        node = entry.finding.node
        previous = entry.previous.node.version if entry.previous else Constants.NOT_AVAILABLE
        lines.append(
            f"| {_component(node)} | {previous} | {node.version} "
            f"| {node.relationship.value} | {_count_cells(entry.finding)} |"
        )
    lines.append("")
    for entry in ordered:
        lines.extend(_violation_details(entry.finding))
        lines.extend(_transitive_details(entry))
    return lines


def render_markdown(report: ReportData, marker: str = Constants.COMMENT_MARKER) -> str:
    """Render the comment body; ``marker`` lets the comment be found again."""
    lines = [marker, "## Dependency changes", ""]
    if not report.has_changes:
        lines.append("No dependency changes detected.")
        return "\n".join(lines) + "\n"

    totals = report.totals()
    lines.append(
        f"**{len(report.introduced)} introduced, {len(report.removed)} removed, "
        f"{len(report.upgraded)} upgraded**"
    )
    lines.append("")
    lines.append(
        "Policy alerts in new or upgraded components: "
        + ", ".join(f"{totals[s]} {s.value}" for s in SEVERITY_ORDER)
    )
    lines.append("")

    if report.introduced:
        lines.extend(_render_section("Introduced", report.introduced))
    if report.upgraded:
        lines.extend(_render_upgrades(report.upgraded))
    if report.removed:
        lines.extend(_render_section("Removed", report.removed))
    return "\n".join(lines).rstrip() + "\n"
