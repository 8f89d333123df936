"""Tests for the governance server client and violation models."""

import json
from unittest.mock import patch

import pytest

from graph.coordinates import ComponentIdentifier
from iq.client import IQClient, build_violation_lookup
from iq.models import Alert, Severity, ViolationSummary

SUMMARY_PAYLOAD = {
    "alerts": [
        {
            "trigger": {
                "policyName": "Security-Critical",
                "threatLevel": 9,
                "componentFacts": [
                    {
                        "constraintFacts": [
                            {
                                "constraintName": "Critical risk CVSS score",
                                "conditionFacts": [
                                    {
                                        "summary": "Security Vulnerability Severity >= 9",
                                        "reason": "Found security vulnerability CVE-2021-44228 with severity 10.0.",
                                    }
                                ],
                            }
                        ]
                    }
                ],
            }
        },
        {"trigger": {"policyName": "License-Threat", "threatLevel": 5, "componentFacts": []}},
        {"trigger": {"policyName": "Architecture-Age", "threatLevel": 1}},
    ]
}


@pytest.fixture
def identifier():
    return ComponentIdentifier.maven("org.apache.logging.log4j", "log4j-core", "jar", "", "2.14.1")


class TestSeverity:
    """Test threat level banding."""

    @pytest.mark.parametrize(
        "level, expected",
        [
            (10, Severity.CRITICAL),
            (8, Severity.CRITICAL),
            (7, Severity.HIGH),
            (4, Severity.HIGH),
            (3, Severity.MEDIUM),
            (2, Severity.MEDIUM),
            (1, Severity.LOW),
            (0, Severity.LOW),
        ],
    )
    def test_bands(self, level, expected):
        assert Severity.from_threat_level(level) is expected


class TestViolationSummary:
    """Test parsing of the summary payload."""

    def test_from_json(self):
        summary = ViolationSummary.from_json(SUMMARY_PAYLOAD)
        assert len(summary.alerts) == 3
        assert summary.max_threat_level == 9
        assert summary.counts() == {
            Severity.CRITICAL: 1,
            Severity.HIGH: 1,
            Severity.MEDIUM: 0,
            Severity.LOW: 1,
        }

    def test_reasons(self):
        alert = ViolationSummary.from_json(SUMMARY_PAYLOAD).alerts[0]
        assert alert.policy_name == "Security-Critical"
        assert list(alert.constraint_facts) == ["Critical risk CVSS score"]
        assert alert.reasons() == [
            "Found security vulnerability CVE-2021-44228 with severity 10.0."
        ]

    def test_reason_falls_back_to_summary(self):
        alert = Alert.from_json({
            "policyName": "P",
            "threatLevel": "6",
            "componentFacts": [{"constraintFacts": [{
                "constraintName": "C",
                "conditionFacts": [{"summary": "only summary"}, {"summary": "only summary"}],
            }]}],
        })
        assert alert.threat_level == 6
        assert alert.reasons() == ["only summary"]

    def test_tolerates_garbage(self):
        assert ViolationSummary.from_json(None).is_empty
        assert ViolationSummary.from_json({"alerts": ["x", 1]}).is_empty
        assert ViolationSummary.from_json({}).max_threat_level == 0

    def test_bad_threat_level_is_zero(self):
        alert = Alert.from_json({"trigger": {"threatLevel": "high"}})
        assert alert.threat_level == 0
        assert alert.policy_name == "unknown policy"


class TestIQClient:
    """Test HTTP interactions of the client."""

    @patch("iq.client.get_json")
    def test_fetch_summary(self, mock_get_json, identifier):
        mock_get_json.return_value = (200, {}, SUMMARY_PAYLOAD)
        client = IQClient("https://iq.example.com/", application_id="my-app")

        summary = client.fetch_summary(identifier)

        assert summary is not None
        assert summary.max_threat_level == 9
        args, kwargs = mock_get_json.call_args
        assert args[0] == "https://iq.example.com/api/v2/components/violationSummary"
        assert kwargs["params"]["applicationId"] == "my-app"
        assert json.loads(kwargs["params"]["componentIdentifier"]) == identifier.to_lookup_dict()
        assert kwargs["auth"] is None

    @patch("iq.client.get_json")
    def test_basic_auth_when_configured(self, mock_get_json, identifier):
        mock_get_json.return_value = (200, {}, {"alerts": []})
        client = IQClient("https://iq.example.com", username="ci", token="secret")

        summary = client.fetch_summary(identifier)

        assert summary is not None and summary.is_empty
        _, kwargs = mock_get_json.call_args
        assert kwargs["auth"] == ("ci", "secret")
        assert "applicationId" not in kwargs["params"]

    @pytest.mark.parametrize("status, data", [(404, None), (500, None), (0, None), (200, None)])
    @patch("iq.client.get_json")
    def test_unusable_answer_is_absent(self, mock_get_json, status, data, identifier):
        mock_get_json.return_value = (status, {}, data)
        assert IQClient("https://iq.example.com").fetch_summary(identifier) is None


class TestBuildViolationLookup:
    """Test lookup factory."""

    def test_without_url_everything_is_absent(self, identifier):
        lookup = build_violation_lookup(None)
        assert lookup(identifier) is None

    @patch("iq.client.get_json")
    def test_with_url_uses_client(self, mock_get_json, identifier):
        mock_get_json.return_value = (200, {}, SUMMARY_PAYLOAD)
        lookup = build_violation_lookup("https://iq.example.com", application_id="app")
        assert lookup(identifier).max_threat_level == 9
        mock_get_json.assert_called_once()
