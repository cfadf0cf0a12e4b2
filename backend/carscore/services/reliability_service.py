"""
Reliability scoring service.

Turns NHTSA complaints and recalls into a ReliabilityScore:
- Per-category scores over the coarse 10-category taxonomy
- Severity buckets across the whole complaint set
- Weighted overall score with a recall penalty
- Lemon-year risk tier

Complaint counts are normalized against an assumed sales volume
(DEFAULT_SALES_VOLUME, 50,000). That figure is an approximation and not
sourced sales data.
"""

from typing import List, Optional, Sequence

from carscore.core.config import settings
from carscore.core.logging import get_logger
from carscore.schemas.complaint import ComplaintRecord, RecallRecord
from carscore.schemas.reliability import (
    ComponentScore,
    LemonRisk,
    ReliabilityScore,
    SeverityBreakdown,
    WhatBreaksEntry,
)
from carscore.services.severity import (
    SeverityBucket,
    calculate_complaint_severity,
    classify_severity,
)
from carscore.services.text_normalizer import COMPONENT_WEIGHTS, categorize_component
from carscore.utils import clamp, is_number, round_half_up, round_to_int

logger = get_logger(__name__)

BASE_COMPONENT_SCORE = 9.5

# Deductions: complaint rate (per 10k vehicles) and accumulated severity
RATE_DEDUCTION_FACTOR = 0.5
MAX_RATE_DEDUCTION = 3.0
SEVERITY_DEDUCTION_FACTOR = 2.0
MAX_SEVERITY_DEDUCTION = 4.0

MAX_ISSUES_PER_COMPONENT = 5
ISSUE_SNIPPET_LENGTH = 100

# Recall penalty: flat amount per campaign plus a capped share by affected units
RECALL_BASE_PENALTY = 0.2
RECALL_UNITS_DIVISOR = 100000
MAX_RECALL_UNITS_PENALTY = 0.5

WHAT_BREAKS_LIMIT = 6

SCORE_LABELS: tuple[tuple[float, str], ...] = (
    (9, "Excellent"),
    (8, "Very Good"),
    (7, "Good"),
    (6, "Above Average"),
    (5, "Average"),
    (4, "Below Average"),
    (3, "Poor"),
)


def _sales_volume(estimated_sales_volume: Optional[float]) -> float:
    """Usable sales volume; anything missing, non-numeric or non-positive falls back."""
    if not is_number(estimated_sales_volume) or estimated_sales_volume <= 0:
        return settings.DEFAULT_SALES_VOLUME
    return estimated_sales_volume


def complaint_rate(complaint_count: int, sales_volume: Optional[float] = None) -> float:
    """Complaints per 10,000 vehicles."""
    return complaint_count / _sales_volume(sales_volume) * 10000


def _collect_issues(complaints: Sequence[ComplaintRecord]) -> List[str]:
    issues: List[str] = []
    for complaint in complaints:
        snippet = complaint.summary[:ISSUE_SNIPPET_LENGTH]
        if not snippet.strip() or snippet in issues:
            continue
        issues.append(snippet)
        if len(issues) == MAX_ISSUES_PER_COMPONENT:
            break
    return issues


def score_component(
    category: str,
    complaints: Sequence[ComplaintRecord],
    estimated_sales_volume: Optional[float] = None,
) -> ComponentScore:
    """
    Score one coarse category from the complaints already assigned to it.

    Args:
        category: Coarse category name
        complaints: Complaints whose coarse label is ``category``
        estimated_sales_volume: Vehicles sold, defaults to DEFAULT_SALES_VOLUME

    Returns:
        ComponentScore with a 1-decimal score in [0, 10]
    """
    count = len(complaints)
    severity_sum = sum(calculate_complaint_severity(c) for c in complaints)
    normalized_rate = complaint_rate(count, estimated_sales_volume)

    score = BASE_COMPONENT_SCORE
    score -= min(normalized_rate * RATE_DEDUCTION_FACTOR, MAX_RATE_DEDUCTION)
    score -= min((severity_sum / 100) * SEVERITY_DEDUCTION_FACTOR, MAX_SEVERITY_DEDUCTION)
    score = clamp(score, 0.0, 10.0)

    return ComponentScore(
        category=category,
        score=round_half_up(score, 1),
        complaint_count=count,
        issues=_collect_issues(complaints),
    )


def score_components(
    complaints: Sequence[ComplaintRecord],
    estimated_sales_volume: Optional[float] = None,
) -> List[ComponentScore]:
    """Score every coarse category, in taxonomy order, including empty ones."""
    grouped: dict[str, List[ComplaintRecord]] = {name: [] for name in COMPONENT_WEIGHTS}
    for complaint in complaints:
        grouped[categorize_component(complaint.components)].append(complaint)

    return [
        score_component(category, members, estimated_sales_volume)
        for category, members in grouped.items()
    ]


def severity_breakdown(complaints: Sequence[ComplaintRecord]) -> SeverityBreakdown:
    """Count complaints per severity bucket; each complaint lands in exactly one."""
    counts = {bucket: 0 for bucket in SeverityBucket}
    for complaint in complaints:
        counts[classify_severity(complaint)] += 1
    return SeverityBreakdown(
        critical=counts[SeverityBucket.CRITICAL],
        major=counts[SeverityBucket.MAJOR],
        minor=counts[SeverityBucket.MINOR],
    )


def calculate_recall_penalty(recalls: Sequence[RecallRecord]) -> float:
    """Sum of 0.2 + min(units / 100k, 0.5) over all recalls."""
    penalty = 0.0
    for recall in recalls:
        units = max(recall.possibly_affected, 0)
        penalty += RECALL_BASE_PENALTY + min(units / RECALL_UNITS_DIVISOR, MAX_RECALL_UNITS_PENALTY)
    return penalty


def weighted_overall(components: Sequence[ComponentScore]) -> float:
    """Weighted mean of the category scores; Other carries zero weight."""
    total = 0.0
    total_weight = 0.0
    for component in components:
        weight = COMPONENT_WEIGHTS.get(component.category, 0.0)
        total += component.score * weight
        total_weight += weight

    if total_weight <= 0:
        return BASE_COMPONENT_SCORE
    return total / total_weight


def classify_lemon_risk(overall: float, breakdown: SeverityBreakdown) -> LemonRisk:
    """First matching rule wins: high, then moderate, then low."""
    if breakdown.critical > 5 or overall < 5:
        return LemonRisk.HIGH
    if breakdown.critical > 2 or breakdown.major > 10 or overall < 7:
        return LemonRisk.MODERATE
    return LemonRisk.LOW


def calculate_reliability_score(
    complaints: Sequence[ComplaintRecord],
    recalls: Sequence[RecallRecord],
    estimated_sales_volume: Optional[float] = None,
) -> ReliabilityScore:
    """
    Calculate the overall reliability score for one vehicle.

    Args:
        complaints: NHTSA complaints, possibly empty
        recalls: NHTSA recalls, possibly empty
        estimated_sales_volume: Vehicles sold, defaults to DEFAULT_SALES_VOLUME

    Returns:
        ReliabilityScore; 9.5 / low risk for empty inputs
    """
    components = score_components(complaints, estimated_sales_volume)
    breakdown = severity_breakdown(complaints)
    penalty = calculate_recall_penalty(recalls)

    overall = round_half_up(max(0.0, weighted_overall(components) - penalty), 1)
    risk = classify_lemon_risk(overall, breakdown)

    logger.debug(
        "Reliability components scored",
        extra={
            "complaints": len(complaints),
            "recalls": len(recalls),
            "recall_penalty": round(penalty, 3),
            "critical": breakdown.critical,
            "major": breakdown.major,
        },
    )
    logger.info(f"Reliability score {overall} (lemon risk: {risk})")

    return ReliabilityScore(
        overall=overall,
        components=components,
        complaint_count=len(complaints),
        recall_count=len(recalls),
        severity_breakdown=breakdown,
        lemon_year_risk=risk,
    )


def score_label(score: float) -> str:
    """Human-readable label for a 0-10 score."""
    for threshold, label in SCORE_LABELS:
        if score >= threshold:
            return label
    return "Very Poor"


def what_breaks(components: Sequence[ComponentScore]) -> List[WhatBreaksEntry]:
    """Categories with complaints, most complained-about first, top 6."""
    total = sum(c.complaint_count for c in components)
    if total == 0:
        return []

    ranked = sorted(
        (c for c in components if c.complaint_count > 0),
        key=lambda c: c.complaint_count,
        reverse=True,
    )
    return [
        WhatBreaksEntry(
            category=c.category,
            percentage=round_to_int(c.complaint_count / total * 100),
            top_issue=c.issues[0] if c.issues else "Various issues reported",
        )
        for c in ranked[:WHAT_BREAKS_LIMIT]
    ]


def format_complaint_percentage(complaint_count: int, estimated_sales: float) -> str:
    """Complaints as a share of vehicles sold, e.g. "<0.01%" or "0.25%"."""
    percentage = complaint_count / _sales_volume(estimated_sales) * 100
    if percentage < 0.01:
        return "<0.01%"
    if percentage < 0.1:
        return f"{percentage:.2f}%"
    return f"{percentage:.1f}%"
