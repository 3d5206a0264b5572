"""Unit tests for domain.verdicts module."""

import pytest

from catalog_verifier.domain.verdicts import assign_status, is_blocking
from catalog_verifier.schemas.common import Severity
from catalog_verifier.schemas.verification import VerificationStatus


class TestIsBlocking:
    @pytest.mark.parametrize("severity", [Severity.CRITICAL, Severity.HIGH])
    def test_blocking(self, severity):
        assert is_blocking(severity) is True

    @pytest.mark.parametrize("severity", [Severity.MEDIUM, Severity.LOW, Severity.INFO])
    def test_not_blocking(self, severity):
        assert is_blocking(severity) is False


class TestAssignStatus:
    def test_no_issues(self):
        assert assign_status([]) == (True, VerificationStatus.VERIFIED)

    def test_minor_issues_only(self):
        assert assign_status([Severity.MEDIUM, Severity.LOW, Severity.INFO]) == (
            True, VerificationStatus.VERIFIED,
        )

    def test_one_high_issue(self):
        assert assign_status([Severity.LOW, Severity.HIGH]) == (False, VerificationStatus.UNVERIFIED)

    def test_critical_issue(self):
        assert assign_status([Severity.CRITICAL]) == (False, VerificationStatus.UNVERIFIED)

    def test_accepts_generators(self):
        severities = (s for s in [Severity.MEDIUM, Severity.CRITICAL])
        is_valid, status = assign_status(severities)

        assert is_valid is False
        assert status == VerificationStatus.UNVERIFIED
