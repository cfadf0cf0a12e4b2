"""
Vehicle price estimation.

Heuristic MSRP estimate used when the vehicle-attribute source has no known
price. Static snapshot tables; no live pricing feed.

Estimation steps:
1. Base price by make (default 30,000)
2. Model multiplier (high confidence), else class base price (medium,
   class-based), else keep the make default (low, inferred)
3. Model-year multiplier
4. Trim multiplier
5. Round to $100, range = [0.85x, 1.25x]
"""

import re
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from carscore.core.logging import get_logger
from carscore.schemas.cost import Confidence, PriceRange, PriceSource, PricingEstimate
from carscore.utils import round_to_hundred

logger = get_logger(__name__)

DEFAULT_BASE_PRICE = 30000
RANGE_LOW_FACTOR = 0.85
RANGE_HIGH_FACTOR = 1.25

# =============================================================================
# Price Tables
# =============================================================================

BASE_MSRP_BY_MAKE: Mapping[str, int] = MappingProxyType({
    # Economy
    "Nissan": 25000,
    "Hyundai": 26000,
    "Kia": 26000,
    "Mitsubishi": 24000,
    "Chevrolet": 28000,
    "Ford": 29000,
    "Toyota": 28000,
    "Honda": 29000,
    "Mazda": 28000,
    "Subaru": 29000,
    "Volkswagen": 30000,
    # Mid-range
    "Jeep": 32000,
    "Dodge": 32000,
    "Chrysler": 34000,
    "GMC": 35000,
    "Ram": 38000,
    # Luxury
    "Acura": 42000,
    "Lexus": 45000,
    "Infiniti": 43000,
    "Audi": 48000,
    "BMW": 52000,
    "Mercedes-Benz": 55000,
    "Cadillac": 50000,
    "Lincoln": 48000,
    "Genesis": 50000,
    "Volvo": 48000,
    "Land Rover": 65000,
    "Jaguar": 60000,
    "Porsche": 75000,
    "Maserati": 80000,
    "Alfa Romeo": 55000,
    # Exotic
    "Bentley": 200000,
    "Rolls-Royce": 350000,
    "Aston Martin": 180000,
    "McLaren": 250000,
    "Ferrari": 300000,
    "Lamborghini": 350000,
    # Electric
    "Tesla": 48000,
    "Rivian": 75000,
    "Lucid": 90000,
    "Polestar": 65000,
})

MODEL_MULTIPLIERS: Mapping[str, Mapping[str, float]] = MappingProxyType({
    "Toyota": MappingProxyType({
        "Corolla": 0.75, "Camry": 0.90, "RAV4": 0.95, "Highlander": 1.15,
        "4Runner": 1.20, "Tacoma": 0.95, "Tundra": 1.30, "Sienna": 1.10,
        "Prius": 0.90, "GR Corolla": 1.10, "GR Supra": 1.50, "Crown": 1.25,
        "Land Cruiser": 1.50, "Sequoia": 1.40,
    }),
    "Honda": MappingProxyType({
        "Civic": 0.75, "Accord": 0.90, "CR-V": 0.95, "Pilot": 1.15,
        "Passport": 1.10, "Odyssey": 1.05, "Ridgeline": 1.00, "HR-V": 0.80,
        "Prologue": 1.20,
    }),
    "Ford": MappingProxyType({
        "F-150": 1.15, "F-250": 1.50, "F-350": 1.80, "Ranger": 0.90,
        "Maverick": 0.75, "Mustang": 1.05, "Bronco": 1.20, "Bronco Sport": 0.95,
        "Escape": 0.85, "Explorer": 1.10, "Edge": 0.95, "Expedition": 1.40,
    }),
    "Chevrolet": MappingProxyType({
        "Silverado 1500": 1.15, "Silverado 2500": 1.60, "Silverado 3500": 1.90,
        "Colorado": 0.90, "Equinox": 0.85, "Blazer": 0.95, "Traverse": 1.10,
        "Tahoe": 1.30, "Suburban": 1.40, "Malibu": 0.80, "Camaro": 1.00,
        "Corvette": 1.80, "Trailblazer": 0.80,
    }),
    "Tesla": MappingProxyType({
        "Model 3": 0.85, "Model Y": 0.95, "Model S": 1.50, "Model X": 1.70,
        "Cybertruck": 1.10,
    }),
    "BMW": MappingProxyType({
        "2 Series": 0.75, "3 Series": 0.90, "4 Series": 1.00, "5 Series": 1.20,
        "7 Series": 1.80, "X1": 0.80, "X3": 0.95, "X5": 1.25, "X7": 1.60,
    }),
    "Mercedes-Benz": MappingProxyType({
        "A-Class": 0.70, "C-Class": 0.90, "E-Class": 1.20, "S-Class": 1.80,
        "GLA": 0.80, "GLC": 0.95, "GLE": 1.25, "GLS": 1.50,
    }),
    "Audi": MappingProxyType({
        "A3": 0.75, "A4": 0.90, "A6": 1.20, "A8": 1.70,
        "Q3": 0.80, "Q5": 1.00, "Q7": 1.30, "Q8": 1.50,
    }),
    "Lexus": MappingProxyType({
        "IS": 0.80, "ES": 0.90, "GS": 1.10, "LS": 1.60, "UX": 0.80,
        "NX": 0.90, "RX": 1.10, "GX": 1.30, "LX": 1.80,
    }),
    "Subaru": MappingProxyType({
        "Impreza": 0.75, "Legacy": 0.80, "Crosstrek": 0.85, "Forester": 0.90,
        "Outback": 0.95, "Ascent": 1.10, "WRX": 0.95, "BRZ": 0.90,
    }),
    "Mazda": MappingProxyType({
        "Mazda3": 0.75, "Mazda6": 0.85, "CX-30": 0.80, "CX-5": 0.90,
        "CX-50": 0.95, "CX-90": 1.15,
    }),
    "Hyundai": MappingProxyType({
        "Elantra": 0.70, "Sonata": 0.80, "Tucson": 0.85, "Santa Fe": 0.95,
        "Palisade": 1.05, "Kona": 0.75, "Ioniq 5": 1.10, "Ioniq 6": 1.05,
    }),
    "Kia": MappingProxyType({
        "Forte": 0.70, "K5": 0.80, "Sportage": 0.85, "Sorento": 0.95,
        "Telluride": 1.05, "Soul": 0.70, "EV6": 1.10, "EV9": 1.40,
    }),
    "Nissan": MappingProxyType({
        "Sentra": 0.70, "Altima": 0.80, "Maxima": 0.95, "Rogue": 0.85,
        "Murano": 0.95, "Pathfinder": 1.05, "Armada": 1.25, "Frontier": 0.90,
        "Titan": 1.20,
    }),
    "Jeep": MappingProxyType({
        "Compass": 0.80, "Cherokee": 0.85, "Grand Cherokee": 1.10,
        "Wrangler": 1.00, "Gladiator": 1.15, "Wagoneer": 1.50,
        "Grand Wagoneer": 2.00,
    }),
    "Volkswagen": MappingProxyType({
        "Jetta": 0.75, "Passat": 0.85, "Arteon": 1.00, "Taos": 0.80,
        "Tiguan": 0.90, "Atlas": 1.10, "ID.4": 1.05,
    }),
})

CLASS_BASE_PRICES: Mapping[str, int] = MappingProxyType({
    "Compact Cars": 24000,
    "Subcompact Cars": 20000,
    "Two Seaters": 35000,
    "Midsize Cars": 28000,
    "Large Cars": 35000,
    "Station Wagons": 32000,
    "Small SUVs": 28000,
    "Standard SUVs": 38000,
    "Small Pickup Trucks": 32000,
    "Standard Pickup Trucks": 45000,
    "Vans": 35000,
    "Minivans": 35000,
    "Special Purpose Vehicles": 40000,
})

# Keyword groups are checked in order; whole words only, so "s" does not
# match every trim containing the letter.
TRIM_KEYWORD_GROUPS: tuple[tuple[tuple[str, ...], float], ...] = (
    # Base trims
    (("lx", "se", "s"), 1.0),
    (("base", "sr"), 0.95),
    # Mid trims
    (("sport", "ex", "sel"), 1.1),
    (("xle", "le", "lt"), 1.05),
    (("touring", "limited"), 1.15),
    # High trims
    (("platinum", "reserve"), 1.25),
    (("ultimate", "calligraphy"), 1.2),
    (("denali", "high country"), 1.3),
    (("trailhawk", "rubicon"), 1.2),
    (("m", "amg", "rs"), 1.4),
)

# (max age, multiplier); older than the last entry gets AGE_MULTIPLIER_OLDEST
YEAR_MULTIPLIERS: tuple[tuple[int, float], ...] = (
    (0, 1.05),
    (1, 1.00),
    (3, 0.95),
    (5, 0.90),
    (8, 0.85),
)
AGE_MULTIPLIER_OLDEST = 0.80

# Used-value retention per year of age; later years use the last entry
USED_VALUE_RETENTION: tuple[float, ...] = (0.80, 0.85, 0.88, 0.90)

PRICE_CATEGORIES: tuple[tuple[int, str], ...] = (
    (25000, "Budget"),
    (35000, "Affordable"),
    (50000, "Mid-range"),
    (75000, "Premium"),
    (150000, "Luxury"),
)


def _casefold_index(table: Mapping[str, object]) -> dict[str, str]:
    return {key.casefold(): key for key in table}


_MAKE_INDEX = _casefold_index(BASE_MSRP_BY_MAKE)
_MODEL_MAKE_INDEX = _casefold_index(MODEL_MULTIPLIERS)
_CLASS_INDEX = _casefold_index(CLASS_BASE_PRICES)
_TRIM_PATTERNS: tuple[tuple[re.Pattern[str], float], ...] = tuple(
    (
        re.compile(r"(?<![a-z0-9])(?:" + "|".join(re.escape(k) for k in keywords) + r")(?![a-z0-9])"),
        multiplier,
    )
    for keywords, multiplier in TRIM_KEYWORD_GROUPS
)


def _current_year(current_year: Optional[int]) -> int:
    return current_year if current_year is not None else datetime.now().year


def lookup_make(make: str) -> Optional[str]:
    """Canonical make name, matched case-insensitively."""
    return _MAKE_INDEX.get(make.strip().casefold())


def lookup_class_base_price(vehicle_class: Optional[str]) -> Optional[int]:
    if not vehicle_class:
        return None
    key = _CLASS_INDEX.get(vehicle_class.strip().casefold())
    return CLASS_BASE_PRICES[key] if key else None


def model_multiplier(make: str, model: str) -> Optional[float]:
    """Per-model multiplier, or None when the make or model is not tabled."""
    make_key = _MODEL_MAKE_INDEX.get(make.strip().casefold())
    if make_key is None:
        return None
    models = MODEL_MULTIPLIERS[make_key]
    wanted = model.strip().casefold()
    for name, multiplier in models.items():
        if name.casefold() == wanted:
            return multiplier
    return None


def year_multiplier(year: int, current_year: Optional[int] = None) -> float:
    """Newer model years price higher; keyed by age relative to the current year."""
    age = _current_year(current_year) - year
    for max_age, multiplier in YEAR_MULTIPLIERS:
        if age <= max_age:
            return multiplier
    return AGE_MULTIPLIER_OLDEST


def trim_multiplier(trim: Optional[str]) -> float:
    """Multiplier of the first trim keyword group found in ``trim``; 1.0 if none."""
    if not trim:
        return 1.0
    text = trim.lower()
    for pattern, multiplier in _TRIM_PATTERNS:
        if pattern.search(text):
            return multiplier
    return 1.0


def estimate_msrp(
    year: int,
    make: str,
    model: str,
    vehicle_class: Optional[str] = None,
    trim: Optional[str] = None,
    current_year: Optional[int] = None,
) -> PricingEstimate:
    """
    Estimate MSRP for a vehicle with no known price.

    Args:
        year: Model year
        make: Vehicle make (case-insensitive)
        model: Vehicle model (case-insensitive)
        vehicle_class: EPA vehicle class, used when the model is not tabled
        trim: Optional trim name
        current_year: Reference year, defaults to now

    Returns:
        PricingEstimate rounded to the nearest $100
    """
    canonical_make = lookup_make(make)
    price = float(BASE_MSRP_BY_MAKE[canonical_make]) if canonical_make else float(DEFAULT_BASE_PRICE)

    multiplier = model_multiplier(make, model)
    class_price = lookup_class_base_price(vehicle_class)

    if multiplier is not None:
        price *= multiplier
        confidence, source = Confidence.HIGH, PriceSource.HISTORICAL
    elif class_price is not None:
        # Class price replaces the make price, it does not scale it
        price = float(class_price)
        confidence, source = Confidence.MEDIUM, PriceSource.CLASS_BASED
    else:
        confidence, source = Confidence.LOW, PriceSource.INFERRED

    price *= year_multiplier(year, current_year)
    price *= trim_multiplier(trim)

    base_price = round_to_hundred(price)
    estimate = PricingEstimate(
        base_price=base_price,
        range=PriceRange(
            low=round_to_hundred(base_price * RANGE_LOW_FACTOR),
            high=round_to_hundred(base_price * RANGE_HIGH_FACTOR),
        ),
        confidence=confidence,
        source=source,
    )

    logger.debug(
        f"Estimated MSRP for {year} {make} {model}: {base_price}",
        extra={"confidence": str(confidence), "source": str(source)},
    )
    return estimate


def estimate_used_value(
    original_msrp: float,
    year: int,
    current_year: Optional[int] = None,
) -> int:
    """Current used value of a vehicle bought new at ``original_msrp``."""
    age = max(0, _current_year(current_year) - year)
    value = float(original_msrp)
    for index in range(age):
        value *= USED_VALUE_RETENTION[min(index, len(USED_VALUE_RETENTION) - 1)]
    return round_to_hundred(value)


def price_category(msrp: float) -> str:
    """Display bucket for a price."""
    for limit, label in PRICE_CATEGORIES:
        if msrp < limit:
            return label
    return "Exotic"
