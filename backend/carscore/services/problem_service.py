"""
Common-problem clustering.

Groups complaints by fine-grained component label (independent of the coarse
scoring taxonomy) for "what owners complain about" reporting.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from carscore.core.logging import get_logger
from carscore.schemas.complaint import ComplaintRecord
from carscore.schemas.reliability import CommonProblem
from carscore.services.text_normalizer import normalize_component
from carscore.utils import round_to_int

logger = get_logger(__name__)

TOP_PROBLEMS_LIMIT = 8
MAX_SAMPLE_ISSUES = 3
SAMPLE_ISSUE_LENGTH = 150


@dataclass
class _Cluster:
    """Per-label accumulator; local to a single aggregation call."""

    count: int = 0
    crashes: bool = False
    fires: bool = False
    injuries: bool = False
    summaries: List[str] = field(default_factory=list)

    def add(self, complaint: ComplaintRecord) -> None:
        self.count += 1
        self.crashes = self.crashes or complaint.crash
        self.fires = self.fires or complaint.fire
        self.injuries = self.injuries or complaint.injuries > 0

        sample = complaint.summary[:SAMPLE_ISSUE_LENGTH]
        if sample.strip() and sample not in self.summaries and len(self.summaries) < MAX_SAMPLE_ISSUES:
            self.summaries.append(sample)


def split_components(components: str) -> List[str]:
    """Split comma-separated component text into non-empty phrases."""
    return [phrase.strip() for phrase in components.split(",") if phrase.strip()]


def complaint_labels(complaint: ComplaintRecord) -> List[str]:
    """
    Fine labels for one complaint, one per component phrase.

    Repeats are kept: "ENGINE, ENGINE AND ENGINE COOLING" yields "Engine"
    twice and counts twice toward that cluster.
    """
    return [normalize_component(p) for p in split_components(complaint.components)]


def aggregate_common_problems(complaints: Sequence[ComplaintRecord]) -> List[CommonProblem]:
    """
    Cluster complaints by fine component label.

    Args:
        complaints: NHTSA complaints, possibly empty

    Returns:
        Up to 8 problems, highest count first; ties keep first-seen order
    """
    if not complaints:
        return []

    # dict preserves insertion order, which is the tie-break
    clusters: dict[str, _Cluster] = {}
    for complaint in complaints:
        for label in complaint_labels(complaint):
            clusters.setdefault(label, _Cluster()).add(complaint)

    total = len(complaints)
    ranked = sorted(clusters.items(), key=lambda item: item[1].count, reverse=True)

    problems = [
        CommonProblem(
            component=label,
            count=cluster.count,
            percentage=round_to_int(cluster.count / total * 100),
            has_crashes=cluster.crashes,
            has_fires=cluster.fires,
            has_injuries=cluster.injuries,
            sample_issues=list(cluster.summaries),
        )
        for label, cluster in ranked[:TOP_PROBLEMS_LIMIT]
    ]

    logger.debug(
        f"Clustered {total} complaints into {len(clusters)} labels",
        extra={"top": [p.component for p in problems]},
    )
    return problems
