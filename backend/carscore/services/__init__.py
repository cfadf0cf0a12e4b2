"""
Scoring and cost services.

Every function here is pure: inputs are frozen models, tables are immutable,
and no state survives between calls, so requests can be scored concurrently.
"""

from carscore.services.ownership_cost_service import (
    calculate_depreciation,
    compare_ownership_costs,
    cost_rating,
    estimate_ownership_cost,
    parse_cost_input,
    resolve_fuel_price,
    resolve_fuel_type,
)
from carscore.services.pricing_service import (
    estimate_msrp,
    estimate_used_value,
    price_category,
    trim_multiplier,
    year_multiplier,
)
from carscore.services.problem_service import aggregate_common_problems
from carscore.services.reliability_service import (
    calculate_recall_penalty,
    calculate_reliability_score,
    classify_lemon_risk,
    complaint_rate,
    format_complaint_percentage,
    score_components,
    score_label,
    what_breaks,
)
from carscore.services.report_service import build_vehicle_report, compare_vehicles
from carscore.services.severity import calculate_complaint_severity, classify_severity
from carscore.services.text_normalizer import (
    COMPONENT_CATEGORIES,
    COMPONENT_WEIGHTS,
    OTHER_CATEGORY,
    categorize_component,
    normalize_component,
)
from carscore.services.verdict_service import generate_pros_and_cons

__all__ = [
    # Text normalization
    "COMPONENT_CATEGORIES",
    "COMPONENT_WEIGHTS",
    "OTHER_CATEGORY",
    "categorize_component",
    "normalize_component",
    # Severity
    "calculate_complaint_severity",
    "classify_severity",
    # Reliability
    "calculate_reliability_score",
    "calculate_recall_penalty",
    "classify_lemon_risk",
    "complaint_rate",
    "format_complaint_percentage",
    "score_components",
    "score_label",
    "what_breaks",
    # Problems and verdict
    "aggregate_common_problems",
    "generate_pros_and_cons",
    # Pricing
    "estimate_msrp",
    "estimate_used_value",
    "price_category",
    "trim_multiplier",
    "year_multiplier",
    # Ownership cost
    "calculate_depreciation",
    "compare_ownership_costs",
    "cost_rating",
    "estimate_ownership_cost",
    "parse_cost_input",
    "resolve_fuel_price",
    "resolve_fuel_type",
    # Reports
    "build_vehicle_report",
    "compare_vehicles",
]
