"""Verification status assignment.

Usage:
    from catalog_verifier.domain.verdicts import assign_status

    is_valid, status = assign_status(result_issues)
"""

from typing import Iterable

from catalog_verifier.schemas.common import BLOCKING_SEVERITIES, Severity
from catalog_verifier.schemas.verification import VerificationStatus


def is_blocking(severity: Severity) -> bool:
    return severity in BLOCKING_SEVERITIES


def assign_status(severities: Iterable[Severity]) -> tuple[bool, VerificationStatus]:
    """Valid iff no issue is critical or high; status follows validity.

    The numeric score plays no part here, so scoring weights can change
    without moving any product between verified and unverified.

    Args:
        severities: Severity of every recorded issue

    Returns:
        ``(is_valid, status)``

    Examples:
        >>> assign_status([Severity.MEDIUM, Severity.LOW])
        (True, <VerificationStatus.VERIFIED: 'verified'>)
        >>> assign_status([Severity.HIGH])
        (False, <VerificationStatus.UNVERIFIED: 'unverified'>)
    """
    is_valid = not any(is_blocking(s) for s in severities)
    return is_valid, VerificationStatus.VERIFIED if is_valid else VerificationStatus.UNVERIFIED
