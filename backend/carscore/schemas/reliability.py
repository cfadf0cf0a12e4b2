"""
Reliability scoring schemas.
"""

from enum import StrEnum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class LemonRisk(StrEnum):
    """Likelihood that a model year is an unusually problematic build."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class Verdict(StrEnum):
    """Buy recommendation derived from score and problem clusters."""

    RECOMMENDED = "recommended"
    CAUTION = "caution"
    AVOID = "avoid"


class ComponentCategory(BaseModel):
    """One entry of the coarse 10-category taxonomy."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Category name")
    weight: float = Field(..., ge=0, le=1, description="Weight in the overall score")


class ComponentScore(BaseModel):
    """Score for one coarse category."""

    model_config = ConfigDict(frozen=True)

    category: str = Field(..., description="Coarse category name")
    score: float = Field(..., ge=0, le=10, description="Score in [0, 10], 1 decimal")
    complaint_count: int = Field(0, ge=0, description="Complaints in this category")
    issues: List[str] = Field(
        default_factory=list, description="Up to 5 distinct summary snippets"
    )


class SeverityBreakdown(BaseModel):
    """Mutually exclusive severity buckets across all complaints."""

    model_config = ConfigDict(frozen=True)

    critical: int = Field(0, ge=0, description="Complaints with a death or fire")
    major: int = Field(0, ge=0, description="Complaints with a crash or injury")
    minor: int = Field(0, ge=0, description="All other complaints")

    @property
    def total(self) -> int:
        return self.critical + self.major + self.minor


class ReliabilityScore(BaseModel):
    """Overall reliability result for one vehicle."""

    model_config = ConfigDict(frozen=True)

    overall: float = Field(..., ge=0, le=10, description="Overall score, 1 decimal")
    components: List[ComponentScore] = Field(default_factory=list)
    complaint_count: int = Field(0, ge=0)
    recall_count: int = Field(0, ge=0)
    severity_breakdown: SeverityBreakdown = Field(default_factory=SeverityBreakdown)
    lemon_year_risk: LemonRisk = Field(LemonRisk.LOW)

    def component(self, category: str) -> ComponentScore | None:
        """Look up a category score by name."""
        for component in self.components:
            if component.category == category:
                return component
        return None


class CommonProblem(BaseModel):
    """A cluster of complaints sharing one fine-grained component label."""

    model_config = ConfigDict(frozen=True)

    component: str = Field(..., description="Normalized fine label")
    count: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, description="Share of all complaints, rounded")
    has_crashes: bool = False
    has_fires: bool = False
    has_injuries: bool = False
    sample_issues: List[str] = Field(
        default_factory=list, description="Up to 3 summaries, 150 chars each"
    )

    @property
    def is_severe(self) -> bool:
        return self.has_crashes or self.has_fires or self.has_injuries


class ProsConsSummary(BaseModel):
    """Narrative pros/cons with a verdict."""

    model_config = ConfigDict(frozen=True)

    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    verdict: Verdict


class WhatBreaksEntry(BaseModel):
    """A coarse category's share of complaints."""

    model_config = ConfigDict(frozen=True)

    category: str
    percentage: int
    top_issue: str
