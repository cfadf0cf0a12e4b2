"""
Component text normalization.

Maps free-text NHTSA component descriptions onto two independent controlled
vocabularies:

- Coarse taxonomy (10 categories) used for weighted reliability scoring.
- Fine taxonomy (~25 labels) used only for common-problem clustering.

The two tables are deliberately different and can disagree for the same
complaint (e.g. "AIR BAGS" is "Safety Systems" coarse but "Airbags" fine).
Both are ordered (matcher, label) lists evaluated top to bottom; the first
match wins and matching is a case-insensitive substring search.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from carscore.schemas.reliability import ComponentCategory

# =============================================================================
# Coarse taxonomy
# =============================================================================

OTHER_CATEGORY = "Other"

# Weights sum to exactly 1.0; Other is counted but never weighted.
COMPONENT_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "Engine": 0.20,
    "Transmission": 0.18,
    "Electrical": 0.12,
    "Brakes": 0.15,
    "Safety Systems": 0.15,
    "Steering/Suspension": 0.10,
    "Interior": 0.05,
    "Exterior": 0.02,
    "Visibility": 0.03,
    OTHER_CATEGORY: 0.00,
})

COMPONENT_CATEGORIES: tuple[ComponentCategory, ...] = tuple(
    ComponentCategory(name=name, weight=weight) for name, weight in COMPONENT_WEIGHTS.items()
)

# Priority ordered: "seat belt" must resolve to Safety Systems before the
# Interior group sees "seat", and brakes are checked after safety systems.
COARSE_KEYWORD_GROUPS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("engine", "fuel system", "exhaust"), "Engine"),
    (("power train", "transmission", "clutch", "driveline"), "Transmission"),
    (("electrical", "battery", "lights", "wiring"), "Electrical"),
    (("air bag", "seat belt", "child seat"), "Safety Systems"),
    (("brake", "parking brake", "abs"), "Brakes"),
    (("steering", "suspension", "wheel"), "Steering/Suspension"),
    (("interior", "seat", "door", "window"), "Interior"),
    (("visibility", "windshield", "wiper"), "Visibility"),
    (("structure", "body", "hood", "trunk"), "Exterior"),
)


def categorize_component(component: Optional[str]) -> str:
    """
    Map a component description to one of the 10 coarse categories.

    Args:
        component: Raw NHTSA component text, possibly comma separated

    Returns:
        Category name; "Other" when no keyword group matches
    """
    if not component:
        return OTHER_CATEGORY

    text = component.lower()
    for keywords, category in COARSE_KEYWORD_GROUPS:
        if any(keyword in text for keyword in keywords):
            return category
    return OTHER_CATEGORY


# =============================================================================
# Fine taxonomy
# =============================================================================

# First substring hit wins, so table order decides overlapping phrases.
FINE_COMPONENT_LABELS: tuple[tuple[str, str], ...] = (
    ("POWER TRAIN:AUTOMATIC TRANSMISSION", "Transmission"),
    ("POWERTRAIN:AUTOMATIC TRANSMISSION", "Transmission"),
    ("POWER TRAIN", "Powertrain"),
    ("ENGINE AND ENGINE COOLING", "Engine"),
    ("ENGINE", "Engine"),
    ("ELECTRICAL SYSTEM", "Electrical"),
    ("ELECTRONIC STABILITY CONTROL", "Stability Control"),
    ("SERVICE BRAKES", "Brakes"),
    ("SERVICE BRAKES, HYDRAULIC", "Brakes"),
    ("AIR BAGS", "Airbags"),
    ("SEATS", "Seats"),
    ("SEAT BELTS", "Seat Belts"),
    ("STEERING", "Steering"),
    ("SUSPENSION", "Suspension"),
    ("FUEL SYSTEM", "Fuel System"),
    ("FUEL SYSTEM, GASOLINE", "Fuel System"),
    ("VISIBILITY", "Visibility"),
    ("VISIBILITY:WINDSHIELD", "Windshield"),
    ("STRUCTURE", "Structure"),
    ("EXTERIOR LIGHTING", "Exterior Lights"),
    ("INTERIOR LIGHTING", "Interior Lights"),
    ("WHEELS", "Wheels"),
    ("TIRES", "Tires"),
    ("VEHICLE SPEED CONTROL", "Cruise Control"),
    ("FORWARD COLLISION AVOIDANCE", "Collision Avoidance"),
    ("LANE DEPARTURE", "Lane Departure"),
    ("BACK OVER PREVENTION", "Backup Camera"),
)


def title_case(phrase: str) -> str:
    """Capitalize the first letter of each space-separated word, lowercase the rest."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in phrase.split(" "))


def normalize_component(component: str) -> str:
    """
    Map one component phrase to a fine-grained label.

    Unknown phrases keep their specificity as a title-cased version of the
    phrase instead of collapsing into "Other".
    """
    phrase = component.strip()
    upper = phrase.upper()
    for needle, label in FINE_COMPONENT_LABELS:
        if needle in upper:
            return label
    return title_case(phrase)


def fine_labels() -> list[str]:
    """Distinct fine labels in table order."""
    return list(dict.fromkeys(label for _, label in FINE_COMPONENT_LABELS))
