"""
Per-complaint severity and severity buckets.
"""

from enum import StrEnum

from carscore.schemas.complaint import ComplaintRecord

BASE_SEVERITY = 1
CRASH_SEVERITY = 3
FIRE_SEVERITY = 4
INJURY_SEVERITY = 2
MAX_INJURY_SEVERITY = 6
DEATH_SEVERITY = 5
MAX_DEATH_SEVERITY = 10
MAX_SEVERITY = 10


class SeverityBucket(StrEnum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


def calculate_complaint_severity(complaint: ComplaintRecord) -> int:
    """
    Severity in [1, 10] for one complaint.

    Injuries and deaths saturate so that a single extreme record cannot
    dominate its category.
    """
    severity = BASE_SEVERITY
    if complaint.crash:
        severity += CRASH_SEVERITY
    if complaint.fire:
        severity += FIRE_SEVERITY
    severity += min(max(complaint.injuries, 0) * INJURY_SEVERITY, MAX_INJURY_SEVERITY)
    severity += min(max(complaint.deaths, 0) * DEATH_SEVERITY, MAX_DEATH_SEVERITY)
    return min(severity, MAX_SEVERITY)


def classify_severity(complaint: ComplaintRecord) -> SeverityBucket:
    """Exactly one bucket per complaint: critical, then major, then minor."""
    if complaint.deaths > 0 or complaint.fire:
        return SeverityBucket.CRITICAL
    if complaint.crash or complaint.injuries > 0:
        return SeverityBucket.MAJOR
    return SeverityBucket.MINOR
