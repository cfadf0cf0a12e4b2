"""
Pricing and ownership-cost schemas.
"""

import math
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FuelType(StrEnum):
    """Controlled fuel-type tags."""

    REGULAR = "regular"
    PREMIUM = "premium"
    DIESEL = "diesel"
    ELECTRIC = "electric"
    HYBRID = "hybrid"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PriceSource(StrEnum):
    HISTORICAL = "historical"
    CLASS_BASED = "class-based"
    INFERRED = "inferred"


# EPA size classes used by every per-class table
VEHICLE_CLASSES: tuple[str, ...] = (
    "Compact Cars",
    "Subcompact Cars",
    "Two Seaters",
    "Midsize Cars",
    "Large Cars",
    "Station Wagons",
    "Small SUVs",
    "Standard SUVs",
    "Small Pickup Trucks",
    "Standard Pickup Trucks",
    "Vans",
    "Minivans",
    "Special Purpose Vehicles",
)


class FuelPrices(BaseModel):
    """Current fuel prices; any tag may be missing or unusable."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    regular: Optional[float] = Field(None, ge=0, description="$/gal")
    premium: Optional[float] = Field(None, ge=0, description="$/gal")
    diesel: Optional[float] = Field(None, ge=0, description="$/gal")
    electric: Optional[float] = Field(None, ge=0, description="$/kWh")

    @field_validator("regular", "premium", "diesel", "electric", mode="before")
    @classmethod
    def drop_unusable(cls, v):
        """Non-numeric, non-finite or negative prices count as missing."""
        if v is None or isinstance(v, bool):
            return None
        try:
            price = float(v)
        except (TypeError, ValueError, OverflowError):
            return None
        if not math.isfinite(price) or price < 0:
            return None
        return price


class OwnershipCostInput(BaseModel):
    """Inputs for one ownership-cost estimate."""

    model_config = ConfigDict(frozen=True)

    price: float = Field(
        ..., ge=0, allow_inf_nan=False, description="MSRP estimate or known price"
    )
    combined_mpg: float = Field(..., description="Combined fuel efficiency")
    fuel_type: FuelType = Field(..., description="Fuel-type tag")
    vehicle_class: str = Field("", description="EPA vehicle class label")
    model_year: int = Field(..., description="Model year")
    complaint_rate: float = Field(0.0, description="Complaints per 10,000 vehicles")
    annual_miles: Optional[float] = Field(
        None, ge=0, allow_inf_nan=False, description="Defaults to 12,000"
    )

    @field_validator("price", "annual_miles", mode="before")
    @classmethod
    def reject_booleans(cls, v: Any):
        if isinstance(v, bool):
            raise ValueError("must be a number")
        return v

    @field_validator("fuel_type", mode="before")
    @classmethod
    def normalize_fuel_type(cls, v: Any):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class OwnershipCostBreakdown(BaseModel):
    """Annualized and five-year ownership cost, whole currency units."""

    model_config = ConfigDict(frozen=True)

    fuel_cost: int = Field(..., ge=0)
    insurance_cost: int = Field(..., ge=0)
    maintenance_cost: int = Field(..., ge=0)
    repair_cost: int = Field(..., ge=0)
    depreciation: int = Field(..., ge=0)
    total_annual_cost: int = Field(..., ge=0)
    five_year_cost: int = Field(..., ge=0)


class PriceRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: int = Field(..., ge=0)
    high: int = Field(..., ge=0)


class PricingEstimate(BaseModel):
    """Heuristic MSRP estimate."""

    model_config = ConfigDict(frozen=True)

    base_price: int = Field(..., ge=0)
    range: PriceRange
    confidence: Confidence
    source: PriceSource = Field(..., description="Provenance of the base price")


class CostComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    cheapest: int = 0
    most_expensive: int = 0
    average_annual: int = 0
