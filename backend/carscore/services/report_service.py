"""
Vehicle report facade.

Runs the full pipeline for one vehicle:
reliability -> common problems -> pros/cons -> price -> ownership cost.

Inputs may be schema instances or raw mappings (NHTSA / EPA rows); raw rows
are validated here. Nothing is cached between calls.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from carscore.core.exceptions import InvalidInputException
from carscore.core.logging import PerformanceLogger, get_logger, scoring_request
from carscore.schemas.complaint import ComplaintRecord, RecallRecord
from carscore.schemas.cost import FuelPrices
from carscore.schemas.report import (
    ComparisonRow,
    VehicleAttributes,
    VehicleComparison,
    VehicleReport,
)
from carscore.services.ownership_cost_service import (
    compare_ownership_costs,
    cost_rating,
    estimate_ownership_cost,
    resolve_fuel_type,
)
from carscore.services.pricing_service import estimate_msrp
from carscore.services.problem_service import aggregate_common_problems
from carscore.services.reliability_service import (
    calculate_reliability_score,
    complaint_rate,
    score_label,
    what_breaks,
)
from carscore.services.verdict_service import generate_pros_and_cons
from carscore.utils import is_number, round_to_int

logger = get_logger(__name__)

DEFAULT_VEHICLE_CLASS = "Midsize Cars"
TOP_PROBLEMS_IN_COMPARISON = 3

Record = Union[Mapping[str, Any], Any]


def _as_vehicle(vehicle: Union[VehicleAttributes, Mapping[str, Any]]) -> VehicleAttributes:
    """
    Validate vehicle attributes.

    Raises:
        InvalidInputException: Negative or non-numeric known MSRP
    """
    if not isinstance(vehicle, VehicleAttributes):
        try:
            vehicle = VehicleAttributes.model_validate(vehicle)
        except ValidationError as e:
            error = next((err for err in e.errors() if err.get("loc", ())[:1] == ("msrp",)), None)
            if error is not None:
                logger.warning(f"Invalid vehicle msrp: {error['msg']}")
                raise InvalidInputException(
                    message=f"Invalid msrp: {error['msg']}",
                    field="msrp",
                    value=error.get("input"),
                ) from e
            raise

    if vehicle.msrp is not None and (not is_number(vehicle.msrp) or vehicle.msrp < 0):
        raise InvalidInputException(
            message="msrp must be a non-negative number",
            field="msrp",
            value=vehicle.msrp,
        )
    return vehicle


def _as_complaints(rows: Optional[Iterable[Record]]) -> List[ComplaintRecord]:
    return [
        row if isinstance(row, ComplaintRecord) else ComplaintRecord.model_validate(row)
        for row in rows or ()
    ]


def _as_recalls(rows: Optional[Iterable[Record]]) -> List[RecallRecord]:
    return [
        row if isinstance(row, RecallRecord) else RecallRecord.model_validate(row)
        for row in rows or ()
    ]


def build_vehicle_report(
    vehicle: Union[VehicleAttributes, Mapping[str, Any]],
    complaints: Optional[Iterable[Record]],
    recalls: Optional[Iterable[Record]],
    fuel_prices: Union[FuelPrices, Mapping[str, Any], None] = None,
    annual_miles: Optional[float] = None,
    sales_volume: Optional[float] = None,
    current_year: Optional[int] = None,
) -> VehicleReport:
    """
    Build the full report for one vehicle.

    Args:
        vehicle: Vehicle attributes
        complaints: NHTSA complaints, possibly empty
        recalls: NHTSA recalls, possibly empty
        fuel_prices: Current fuel prices; missing tags use defaults
        annual_miles: Annual mileage, defaults to DEFAULT_ANNUAL_MILES
        sales_volume: Estimated sales volume, defaults to DEFAULT_SALES_VOLUME
        current_year: Reference year, defaults to now

    Returns:
        VehicleReport. ``pricing`` is set only when no MSRP is known and
        ``ownership_cost`` only when a combined MPG is known.

    Raises:
        InvalidInputException: Negative or non-numeric msrp or annual_miles
    """
    attrs = _as_vehicle(vehicle)
    complaint_rows = _as_complaints(complaints)
    recall_rows = _as_recalls(recalls)

    with scoring_request(), PerformanceLogger(
        "vehicle_report",
        vehicle=attrs.display_name,
        complaints=len(complaint_rows),
        recalls=len(recall_rows),
    ):
        logger.info(f"Building report for {attrs.display_name}")

        reliability = calculate_reliability_score(complaint_rows, recall_rows, sales_volume)
        problems = aggregate_common_problems(complaint_rows)
        pros_cons = generate_pros_and_cons(
            reliability.overall,
            reliability.complaint_count,
            reliability.recall_count,
            attrs.combined_mpg,
            problems,
        )

        pricing = None
        if attrs.msrp:
            price = attrs.msrp
        else:
            pricing = estimate_msrp(
                attrs.year,
                attrs.make,
                attrs.model,
                vehicle_class=attrs.vehicle_class,
                trim=attrs.trim,
                current_year=current_year,
            )
            price = pricing.base_price

        rate = complaint_rate(reliability.complaint_count, sales_volume)

        ownership_cost = None
        rating = None
        if attrs.combined_mpg is not None and attrs.combined_mpg > 0:
            vehicle_class = attrs.vehicle_class or DEFAULT_VEHICLE_CLASS
            ownership_cost = estimate_ownership_cost(
                {
                    "price": price,
                    "combined_mpg": attrs.combined_mpg,
                    "fuel_type": resolve_fuel_type(attrs.fuel_type),
                    "vehicle_class": vehicle_class,
                    "model_year": attrs.year,
                    "complaint_rate": rate,
                    "annual_miles": annual_miles,
                },
                fuel_prices=fuel_prices,
                current_year=current_year,
            )
            rating = cost_rating(ownership_cost.total_annual_cost, vehicle_class)
        else:
            logger.debug(f"No combined MPG for {attrs.display_name}, skipping ownership cost")

        return VehicleReport(
            vehicle=attrs,
            reliability=reliability,
            score_label=score_label(reliability.overall),
            what_breaks=what_breaks(reliability.components),
            common_problems=problems,
            pros_cons=pros_cons,
            pricing=pricing,
            price_used=round_to_int(price),
            complaint_rate=rate,
            ownership_cost=ownership_cost,
            cost_rating=rating,
        )


def compare_vehicles(reports: Sequence[VehicleReport]) -> VehicleComparison:
    """Side-by-side summary rows plus a cost comparison across reports."""
    rows = []
    for report in reports:
        cost = report.ownership_cost
        rows.append(
            ComparisonRow(
                year=report.vehicle.year,
                make=report.vehicle.make,
                model=report.vehicle.model,
                reliability_score=report.reliability.overall,
                score_label=report.score_label,
                complaint_count=report.reliability.complaint_count,
                recall_count=report.reliability.recall_count,
                combined_mpg=report.vehicle.combined_mpg,
                annual_fuel_cost=cost.fuel_cost if cost else None,
                total_annual_cost=cost.total_annual_cost if cost else None,
                five_year_cost=cost.five_year_cost if cost else None,
                verdict=report.pros_cons.verdict,
                top_problems=[
                    p.component for p in report.common_problems[:TOP_PROBLEMS_IN_COMPARISON]
                ],
                severity_breakdown=report.reliability.severity_breakdown,
            )
        )

    costs = [r.ownership_cost for r in reports if r.ownership_cost is not None]
    return VehicleComparison(vehicles=rows, costs=compare_ownership_costs(costs))
