"""
Pydantic schemas for CarScore inputs and results.
"""

from carscore.schemas.complaint import ComplaintRecord, RecallRecord
from carscore.schemas.cost import (
    VEHICLE_CLASSES,
    Confidence,
    CostComparison,
    FuelPrices,
    FuelType,
    OwnershipCostBreakdown,
    OwnershipCostInput,
    PriceRange,
    PriceSource,
    PricingEstimate,
)
from carscore.schemas.reliability import (
    CommonProblem,
    ComponentCategory,
    ComponentScore,
    LemonRisk,
    ProsConsSummary,
    ReliabilityScore,
    SeverityBreakdown,
    Verdict,
    WhatBreaksEntry,
)
from carscore.schemas.report import (
    ComparisonRow,
    VehicleAttributes,
    VehicleComparison,
    VehicleReport,
)

__all__ = [
    # Inputs
    "ComplaintRecord",
    "RecallRecord",
    "VehicleAttributes",
    "FuelPrices",
    "OwnershipCostInput",
    # Enumerations
    "FuelType",
    "Confidence",
    "PriceSource",
    "LemonRisk",
    "Verdict",
    "VEHICLE_CLASSES",
    # Results
    "ComponentCategory",
    "ComponentScore",
    "SeverityBreakdown",
    "ReliabilityScore",
    "CommonProblem",
    "ProsConsSummary",
    "WhatBreaksEntry",
    "PriceRange",
    "PricingEstimate",
    "OwnershipCostBreakdown",
    "CostComparison",
    "VehicleReport",
    "ComparisonRow",
    "VehicleComparison",
]
