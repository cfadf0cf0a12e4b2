"""
Pros/cons narrative and buy verdict.

Each axis (score, complaints, recalls, fuel economy, problem clusters) is
evaluated independently and appends its own strings.
"""

from typing import List, Optional, Sequence

from carscore.core.logging import get_logger
from carscore.schemas.reliability import CommonProblem, ProsConsSummary, Verdict

logger = get_logger(__name__)

RECOMMENDED_MIN_SCORE = 7.5
AVOID_BELOW_SCORE = 5.0
AVOID_SEVERE_CLUSTERS = 2
FREQUENT_PROBLEM_PERCENTAGE = 15


def _format_mpg(mpg: float) -> str:
    # 30.0 -> "30", 27.5 -> "27.5"
    return f"{mpg:g}"


def _reliability_axis(score: float, pros: List[str], cons: List[str]) -> None:
    if score >= 9:
        pros.append("Excellent reliability record with minimal reported issues")
    elif score >= 8:
        pros.append("Good reliability with few significant problems")
    elif score >= 7:
        pros.append("Above-average reliability for its class")

    if score < 6:
        cons.append("Below-average reliability - consider extended warranty")


def _complaint_axis(count: int, pros: List[str], cons: List[str]) -> None:
    if count == 0:
        pros.append("No complaints reported to NHTSA")
    elif count <= 5:
        pros.append("Very few owner complaints reported")
    elif count > 50:
        cons.append(f"High number of complaints ({count}) reported to NHTSA")


def _recall_axis(count: int, pros: List[str], cons: List[str]) -> None:
    if count == 0:
        pros.append("No safety recalls issued")
    elif count > 3:
        cons.append(f"Multiple safety recalls ({count}) - verify repairs completed")


def _fuel_economy_axis(mpg: Optional[float], pros: List[str], cons: List[str]) -> None:
    # Missing or non-positive MPG means unknown
    if mpg is None or mpg <= 0:
        return
    if mpg >= 35:
        pros.append(f"Excellent fuel economy ({_format_mpg(mpg)} MPG combined)")
    elif mpg >= 28:
        pros.append(f"Good fuel economy ({_format_mpg(mpg)} MPG combined)")
    elif mpg < 18:
        cons.append(f"Poor fuel economy ({_format_mpg(mpg)} MPG combined)")


def severe_problems(problems: Sequence[CommonProblem]) -> List[CommonProblem]:
    """Clusters with at least one crash, fire, or injury."""
    return [p for p in problems if p.is_severe]


def decide_verdict(reliability_score: float, severe_count: int) -> Verdict:
    if reliability_score >= RECOMMENDED_MIN_SCORE and severe_count == 0:
        return Verdict.RECOMMENDED
    if reliability_score < AVOID_BELOW_SCORE or severe_count >= AVOID_SEVERE_CLUSTERS:
        return Verdict.AVOID
    return Verdict.CAUTION


def generate_pros_and_cons(
    reliability_score: float,
    complaint_count: int,
    recall_count: int,
    combined_mpg: Optional[float],
    problems: Sequence[CommonProblem],
) -> ProsConsSummary:
    """
    Build the pros/cons lists and the verdict.

    Args:
        reliability_score: Overall score in [0, 10]
        complaint_count: Total complaints
        recall_count: Total recalls
        combined_mpg: Combined MPG, None when unknown
        problems: Common problems, highest count first

    Returns:
        ProsConsSummary
    """
    pros: List[str] = []
    cons: List[str] = []

    _reliability_axis(reliability_score, pros, cons)
    _complaint_axis(complaint_count, pros, cons)
    _recall_axis(recall_count, pros, cons)
    _fuel_economy_axis(combined_mpg, pros, cons)

    severe = severe_problems(problems)
    if severe:
        cons.append(f"Safety concerns reported with: {', '.join(p.component for p in severe)}")

    frequent = [p for p in problems[:3] if p.percentage >= FREQUENT_PROBLEM_PERCENTAGE]
    if frequent:
        cons.append(f"Common issues: {', '.join(p.component for p in frequent)}")

    verdict = decide_verdict(reliability_score, len(severe))
    logger.info(
        f"Verdict: {verdict}",
        extra={"score": reliability_score, "severe_clusters": len(severe)},
    )
    return ProsConsSummary(pros=pros, cons=cons, verdict=verdict)
