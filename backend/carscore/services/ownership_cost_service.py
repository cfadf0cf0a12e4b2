"""
Ownership cost estimation.

Annualized cost of owning a vehicle, split into fuel, insurance,
maintenance, repairs, and depreciation, plus a flat-discounted five-year
projection. All amounts are whole currency units and never negative.
"""

from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from carscore.core.config import settings
from carscore.core.exceptions import InvalidInputException, UnknownFuelTypeException
from carscore.core.logging import get_logger
from carscore.schemas.cost import (
    CostComparison,
    FuelPrices,
    FuelType,
    OwnershipCostBreakdown,
    OwnershipCostInput,
)
from carscore.utils import is_number, round_to_int

logger = get_logger(__name__)

# =============================================================================
# Cost Tables
# =============================================================================

# Electric efficiency in miles per kWh
ELECTRIC_MILES_PER_KWH = 3.5

BASE_INSURANCE = 1200
INSURANCE_REFERENCE_PRICE = 30000
INSURANCE_PRICE_SCALE = 100000
MIN_INSURANCE_PRICE_FACTOR = 0.8

BASE_REPAIR_COST = 200
REPAIR_COST_PER_COMPLAINT_RATE = 150

FIVE_YEAR_DISCOUNT = 0.95

# Retained share of the original price by age in years; ages past 10 clamp
DEPRECIATION_CURVE: tuple[float, ...] = (
    1.00, 0.80, 0.70, 0.62, 0.55, 0.49, 0.44, 0.39, 0.35, 0.30, 0.26,
)

INSURANCE_MULTIPLIERS: Mapping[str, float] = MappingProxyType({
    "Compact Cars": 1.0,
    "Subcompact Cars": 0.9,
    "Two Seaters": 1.4,
    "Midsize Cars": 1.05,
    "Large Cars": 1.1,
    "Station Wagons": 1.0,
    "Small SUVs": 1.15,
    "Standard SUVs": 1.25,
    "Small Pickup Trucks": 1.15,
    "Standard Pickup Trucks": 1.3,
    "Vans": 1.1,
    "Minivans": 1.0,
    "Special Purpose Vehicles": 1.35,
})
DEFAULT_INSURANCE_MULTIPLIER = 1.0

# Maintenance per 10,000 miles
MAINTENANCE_COSTS: Mapping[str, int] = MappingProxyType({
    "Compact Cars": 400,
    "Subcompact Cars": 350,
    "Two Seaters": 650,
    "Midsize Cars": 450,
    "Large Cars": 500,
    "Station Wagons": 450,
    "Small SUVs": 500,
    "Standard SUVs": 600,
    "Small Pickup Trucks": 500,
    "Standard Pickup Trucks": 650,
    "Vans": 550,
    "Minivans": 500,
    "Special Purpose Vehicles": 750,
})
DEFAULT_MAINTENANCE_COST = 500

EXPECTED_ANNUAL_COSTS: Mapping[str, int] = MappingProxyType({
    "Compact Cars": 6500,
    "Subcompact Cars": 6000,
    "Two Seaters": 9000,
    "Midsize Cars": 7500,
    "Large Cars": 8500,
    "Station Wagons": 7500,
    "Small SUVs": 8000,
    "Standard SUVs": 9500,
    "Small Pickup Trucks": 8500,
    "Standard Pickup Trucks": 10500,
    "Vans": 9000,
    "Minivans": 8000,
    "Special Purpose Vehicles": 11000,
})
DEFAULT_EXPECTED_ANNUAL_COST = 8000

COST_RATINGS: tuple[tuple[float, str], ...] = (
    (0.8, "A"),
    (0.95, "B"),
    (1.1, "C"),
    (1.25, "D"),
)

FuelPriceInput = Union[FuelPrices, Mapping[str, Any], None]


def _class_value(table: Mapping[str, Any], vehicle_class: Optional[str], default: Any) -> Any:
    """Case-insensitive per-class lookup with a default for unknown classes."""
    if not vehicle_class:
        return default
    wanted = vehicle_class.strip().casefold()
    for name, value in table.items():
        if name.casefold() == wanted:
            return value
    return default


# =============================================================================
# Input handling
# =============================================================================


def parse_cost_input(data: Union[OwnershipCostInput, Mapping[str, Any]]) -> OwnershipCostInput:
    """
    Validate raw cost input.

    Raises:
        UnknownFuelTypeException: fuel_type outside the controlled enumeration
        InvalidInputException: any other invalid field (e.g. negative price)
    """
    if isinstance(data, OwnershipCostInput):
        return data

    try:
        return OwnershipCostInput.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error.get("loc") else None
        value = error.get("input")
        logger.warning(f"Invalid ownership cost input: {field}: {error['msg']}")
        if field == "fuel_type":
            raise UnknownFuelTypeException(value) from e
        raise InvalidInputException(
            message=f"Invalid {field}: {error['msg']}",
            field=field,
            value=value,
        ) from e


def _check_non_negative(name: str, value: Any) -> None:
    if not is_number(value) or value < 0:
        logger.warning(f"Rejected {name}={value!r}")
        raise InvalidInputException(
            message=f"{name} must be a non-negative number",
            field=name,
            value=value,
        )


def resolve_fuel_type(raw: Optional[str]) -> FuelType:
    """Map an EPA fuel-type string (e.g. "Premium Gasoline") to a fuel tag."""
    text = (raw or "").lower()
    if "electric" in text:
        return FuelType.ELECTRIC
    if "hybrid" in text:
        return FuelType.HYBRID
    if "premium" in text:
        return FuelType.PREMIUM
    if "diesel" in text:
        return FuelType.DIESEL
    return FuelType.REGULAR


def resolve_fuel_price(fuel_type: FuelType, fuel_prices: FuelPriceInput = None) -> float:
    """
    Price per unit for a fuel tag.

    Hybrids use the regular gasoline price. Tags missing from ``fuel_prices``
    fall back to the configured FUEL_PRICE_* defaults.
    """
    if fuel_prices is not None and not isinstance(fuel_prices, FuelPrices):
        try:
            fuel_prices = FuelPrices.model_validate(fuel_prices)
        except ValidationError:
            logger.warning(f"Ignoring unreadable fuel price table: {fuel_prices!r}")
            fuel_prices = None

    key = FuelType.REGULAR if fuel_type == FuelType.HYBRID else FuelType(fuel_type)
    defaults = {
        FuelType.REGULAR: settings.FUEL_PRICE_REGULAR,
        FuelType.PREMIUM: settings.FUEL_PRICE_PREMIUM,
        FuelType.DIESEL: settings.FUEL_PRICE_DIESEL,
        FuelType.ELECTRIC: settings.FUEL_PRICE_ELECTRIC,
    }

    price = getattr(fuel_prices, key.value, None) if fuel_prices is not None else None
    if price is None:
        logger.debug(f"No {key} fuel price supplied, using default {defaults[key]}")
        return defaults[key]
    return price


# =============================================================================
# Cost components
# =============================================================================


def calculate_fuel_cost(
    fuel_type: FuelType,
    combined_mpg: float,
    annual_miles: float,
    price_per_unit: float,
) -> int:
    if fuel_type == FuelType.ELECTRIC:
        return round_to_int((annual_miles / ELECTRIC_MILES_PER_KWH) * price_per_unit)
    return round_to_int((annual_miles / max(combined_mpg, 1)) * price_per_unit)


def calculate_insurance_cost(price: float, vehicle_class: Optional[str]) -> int:
    multiplier = _class_value(INSURANCE_MULTIPLIERS, vehicle_class, DEFAULT_INSURANCE_MULTIPLIER)
    price_factor = max(
        1 + (price - INSURANCE_REFERENCE_PRICE) / INSURANCE_PRICE_SCALE,
        MIN_INSURANCE_PRICE_FACTOR,
    )
    return round_to_int(BASE_INSURANCE * multiplier * price_factor)


def calculate_maintenance_cost(annual_miles: float, vehicle_class: Optional[str]) -> int:
    base = _class_value(MAINTENANCE_COSTS, vehicle_class, DEFAULT_MAINTENANCE_COST)
    return round_to_int((annual_miles / 10000) * base)


def calculate_repair_cost(complaint_rate: float) -> int:
    return BASE_REPAIR_COST + round_to_int(complaint_rate * REPAIR_COST_PER_COMPLAINT_RATE)


def retained_value_ratio(age: int) -> float:
    """Share of the original price retained at ``age`` years."""
    return DEPRECIATION_CURVE[min(max(age, 0), len(DEPRECIATION_CURVE) - 1)]


def calculate_depreciation(
    price: float,
    model_year: int,
    current_year: Optional[int] = None,
) -> int:
    """Value lost between the vehicle's current age and the next year."""
    year = current_year if current_year is not None else datetime.now().year
    age = max(0, year - model_year)
    return round_to_int(price * (retained_value_ratio(age) - retained_value_ratio(age + 1)))


# =============================================================================
# Public API
# =============================================================================


def estimate_ownership_cost(
    data: Union[OwnershipCostInput, Mapping[str, Any]],
    fuel_prices: FuelPriceInput = None,
    current_year: Optional[int] = None,
) -> OwnershipCostBreakdown:
    """
    Estimate annual and five-year ownership cost.

    Args:
        data: OwnershipCostInput or a raw mapping of its fields
        fuel_prices: Current fuel prices; missing tags use defaults
        current_year: Reference year for depreciation, defaults to now

    Returns:
        OwnershipCostBreakdown

    Raises:
        InvalidInputException: Negative or non-numeric price / annual_miles,
            or an unrecognized fuel type
    """
    cost_input = parse_cost_input(data)

    # model_construct() skips validation, so check again here
    _check_non_negative("price", cost_input.price)
    annual_miles = cost_input.annual_miles
    if annual_miles is None:
        annual_miles = settings.DEFAULT_ANNUAL_MILES
    _check_non_negative("annual_miles", annual_miles)
    try:
        fuel_type = FuelType(cost_input.fuel_type)
    except ValueError as e:
        raise UnknownFuelTypeException(cost_input.fuel_type) from e

    unit_price = resolve_fuel_price(fuel_type, fuel_prices)

    fuel_cost = max(0, calculate_fuel_cost(
        fuel_type, cost_input.combined_mpg, annual_miles, unit_price
    ))
    insurance_cost = max(0, calculate_insurance_cost(cost_input.price, cost_input.vehicle_class))
    maintenance_cost = max(0, calculate_maintenance_cost(annual_miles, cost_input.vehicle_class))
    repair_cost = max(0, calculate_repair_cost(cost_input.complaint_rate))
    depreciation = max(0, calculate_depreciation(
        cost_input.price, cost_input.model_year, current_year
    ))

    total = fuel_cost + insurance_cost + maintenance_cost + repair_cost + depreciation
    five_year = round_to_int(total * 5 * FIVE_YEAR_DISCOUNT)

    logger.info(
        f"Ownership cost: {total}/yr, {five_year} over five years",
        extra={
            "fuel_type": str(fuel_type),
            "vehicle_class": cost_input.vehicle_class,
            "annual_miles": annual_miles,
        },
    )

    return OwnershipCostBreakdown(
        fuel_cost=fuel_cost,
        insurance_cost=insurance_cost,
        maintenance_cost=maintenance_cost,
        repair_cost=repair_cost,
        depreciation=depreciation,
        total_annual_cost=total,
        five_year_cost=five_year,
    )


def cost_rating(annual_cost: float, vehicle_class: Optional[str]) -> str:
    """Letter grade A-F against the class's expected annual cost."""
    expected = _class_value(EXPECTED_ANNUAL_COSTS, vehicle_class, DEFAULT_EXPECTED_ANNUAL_COST)
    ratio = annual_cost / expected
    for limit, grade in COST_RATINGS:
        if ratio <= limit:
            return grade
    return "F"


def compare_ownership_costs(costs: Sequence[OwnershipCostBreakdown]) -> CostComparison:
    """Cheapest, most expensive and average total annual cost."""
    if not costs:
        return CostComparison()

    annual = [c.total_annual_cost for c in costs]
    return CostComparison(
        cheapest=min(annual),
        most_expensive=max(annual),
        average_annual=round_to_int(sum(annual) / len(annual)),
    )
