"""
CarScore - vehicle reliability scoring and ownership-cost estimation.

Turns NHTSA complaints and recalls plus vehicle attributes into a
reliability score, common-problem clusters, a buy verdict, an MSRP
estimate, and a total cost of ownership breakdown.
"""

from carscore.services import build_vehicle_report, compare_vehicles

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "build_vehicle_report",
    "compare_vehicles",
]
