"""
Vehicle attribute input and aggregated report schemas.
"""

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from carscore.schemas.cost import CostComparison, OwnershipCostBreakdown, PricingEstimate
from carscore.schemas.reliability import (
    CommonProblem,
    ProsConsSummary,
    ReliabilityScore,
    SeverityBreakdown,
    Verdict,
    WhatBreaksEntry,
)


class VehicleAttributes(BaseModel):
    """Vehicle attributes from the EPA / VIN collaborators."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    year: int = Field(..., description="Model year")
    make: str = Field(..., description="Vehicle make")
    model: str = Field(..., description="Vehicle model")
    trim: Optional[str] = Field(None, description="Trim level")
    vehicle_class: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("vehicle_class", "vehicleClass", "VClass"),
        description="EPA vehicle class label",
    )
    combined_mpg: Optional[float] = Field(
        None,
        validation_alias=AliasChoices("combined_mpg", "combinedMpg", "comb08"),
        description="Combined MPG (MPGe for electric)",
    )
    fuel_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("fuel_type", "fuelType"),
        description="Raw fuel-type string, e.g. 'Premium Gasoline'",
    )
    msrp: Optional[float] = Field(None, ge=0, description="Known MSRP, if any")

    @property
    def display_name(self) -> str:
        return f"{self.year} {self.make} {self.model}"


class VehicleReport(BaseModel):
    """Everything the engine derives for one vehicle."""

    model_config = ConfigDict(frozen=True)

    vehicle: VehicleAttributes
    reliability: ReliabilityScore
    score_label: str
    what_breaks: List[WhatBreaksEntry] = Field(default_factory=list)
    common_problems: List[CommonProblem] = Field(default_factory=list)
    pros_cons: ProsConsSummary
    pricing: Optional[PricingEstimate] = Field(
        None, description="Present only when no known MSRP was supplied"
    )
    price_used: int = Field(..., ge=0)
    complaint_rate: float = Field(0.0, ge=0, description="Complaints per 10,000 vehicles")
    ownership_cost: Optional[OwnershipCostBreakdown] = Field(
        None, description="Present only when a combined MPG is known"
    )
    cost_rating: Optional[str] = None


class ComparisonRow(BaseModel):
    """One vehicle's line in a side-by-side comparison."""

    model_config = ConfigDict(frozen=True)

    year: int
    make: str
    model: str
    reliability_score: float
    score_label: str
    complaint_count: int
    recall_count: int
    combined_mpg: Optional[float] = None
    annual_fuel_cost: Optional[int] = None
    total_annual_cost: Optional[int] = None
    five_year_cost: Optional[int] = None
    verdict: Verdict
    top_problems: List[str] = Field(default_factory=list)
    severity_breakdown: SeverityBreakdown


class VehicleComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    vehicles: List[ComparisonRow] = Field(default_factory=list)
    costs: CostComparison = Field(default_factory=CostComparison)
