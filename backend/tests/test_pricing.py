"""
Tests for MSRP estimation.

Tests cover:
- Make/model/class lookup and confidence levels
- Year and trim multipliers
- Rounding and price range
- Used-value estimate and price categories
"""

import pytest

from carscore.schemas import Confidence, PriceSource
from carscore.services.pricing_service import (
    BASE_MSRP_BY_MAKE,
    CLASS_BASE_PRICES,
    MODEL_MULTIPLIERS,
    estimate_msrp,
    estimate_used_value,
    model_multiplier,
    price_category,
    trim_multiplier,
    year_multiplier,
)
from carscore.schemas.cost import VEHICLE_CLASSES


class TestPriceTables:
    def test_table_sizes(self):
        assert len(BASE_MSRP_BY_MAKE) >= 40
        assert len(MODEL_MULTIPLIERS) >= 15
        assert set(CLASS_BASE_PRICES) == set(VEHICLE_CLASSES)

    def test_tables_read_only(self):
        with pytest.raises(TypeError):
            BASE_MSRP_BY_MAKE["Toyota"] = 1  # type: ignore[index]


class TestEstimateMsrp:
    """Test the estimation steps and confidence levels."""

    def test_model_multiplier_high_confidence(self, current_year):
        estimate = estimate_msrp(2023, "Toyota", "Camry", current_year=current_year)
        assert estimate.base_price == 25200
        assert estimate.confidence == Confidence.HIGH
        assert estimate.source == PriceSource.HISTORICAL
        assert (estimate.range.low, estimate.range.high) == (21400, 31500)

    def test_lookup_is_case_insensitive(self, current_year):
        estimate = estimate_msrp(2021, "toyota", "rav4", current_year=current_year)
        assert estimate.confidence == Confidence.HIGH
        assert estimate.base_price == 25300

        benz = estimate_msrp(2023, "MERCEDES-BENZ", "c-class", current_year=current_year)
        assert benz.base_price == 49500

    def test_class_price_replaces_make_price(self, current_year):
        estimate = estimate_msrp(
            2023, "Kia", "Carnival", vehicle_class="Minivans", current_year=current_year
        )
        assert estimate.base_price == 35000
        assert estimate.confidence == Confidence.MEDIUM
        assert estimate.source == PriceSource.CLASS_BASED

    def test_model_multiplier_wins_over_class(self, current_year):
        estimate = estimate_msrp(
            2023, "Honda", "Civic", vehicle_class="Standard SUVs", current_year=current_year
        )
        assert estimate.base_price == 21800
        assert estimate.confidence == Confidence.HIGH

    def test_known_make_unknown_model_and_class(self, current_year):
        estimate = estimate_msrp(
            2023, "Porsche", "911", vehicle_class="Spaceship", current_year=current_year
        )
        assert estimate.base_price == 75000
        assert estimate.confidence == Confidence.LOW
        assert estimate.source == PriceSource.INFERRED

    def test_unknown_make_defaults(self, current_year):
        estimate = estimate_msrp(2015, "Zastava", "Yugo", current_year=current_year)
        assert estimate.base_price == 24000
        assert estimate.confidence == Confidence.LOW

    def test_trim_applied(self, current_year):
        estimate = estimate_msrp(2023, "Toyota", "Camry", trim="XLE", current_year=current_year)
        assert estimate.base_price == 26500

    def test_range_brackets_base(self, current_year):
        for make, model in (("Ford", "F-150"), ("Tesla", "Model Y"), ("Lexus", "RX")):
            estimate = estimate_msrp(2022, make, model, current_year=current_year)
            assert estimate.range.low <= estimate.base_price <= estimate.range.high
            assert estimate.base_price % 100 == 0
            assert estimate.range.low % 100 == 0 and estimate.range.high % 100 == 0

    def test_deterministic(self, current_year):
        first = estimate_msrp(2022, "BMW", "X5", trim="M Sport", current_year=current_year)
        second = estimate_msrp(2022, "BMW", "X5", trim="M Sport", current_year=current_year)
        assert first == second


class TestMultipliers:
    @pytest.mark.parametrize(
        "year,expected",
        [
            (2025, 1.05),
            (2024, 1.05),
            (2023, 1.00),
            (2021, 0.95),
            (2019, 0.90),
            (2016, 0.85),
            (2015, 0.80),
            (1990, 0.80),
        ],
    )
    def test_year_multiplier(self, current_year, year, expected):
        assert year_multiplier(year, current_year) == expected

    @pytest.mark.parametrize(
        "trim,expected",
        [
            (None, 1.0),
            ("", 1.0),
            ("LX", 1.0),
            ("SE", 1.0),
            ("Base", 0.95),
            ("SR", 0.95),
            ("Sport", 1.1),
            ("EX-L", 1.1),
            ("XLE", 1.05),
            ("LT", 1.05),
            ("Touring", 1.15),
            ("Limited", 1.15),
            ("Platinum", 1.25),
            ("Ultimate", 1.2),
            ("Denali", 1.3),
            ("High Country", 1.3),
            ("Rubicon", 1.2),
            ("AMG", 1.4),
            ("Signature", 1.0),
        ],
    )
    def test_trim_multiplier(self, trim, expected):
        assert trim_multiplier(trim) == expected

    def test_trim_keywords_match_whole_words(self):
        # "s" must not match inside "Signature" or "Premium Plus"
        assert trim_multiplier("Premium Plus") == 1.0

    def test_model_multiplier_lookup(self):
        assert model_multiplier("Ford", "F-150") == 1.15
        assert model_multiplier("ford", "bronco sport") == 0.95
        assert model_multiplier("Ford", "Model T") is None
        assert model_multiplier("Saab", "9-3") is None


class TestUsedValue:
    def test_new_vehicle(self, current_year):
        assert estimate_used_value(30000, current_year, current_year) == 30000

    def test_two_years(self, current_year):
        assert estimate_used_value(30000, current_year - 2, current_year) == 20400

    def test_five_years(self, current_year):
        assert estimate_used_value(30000, current_year - 5, current_year) == 14500

    def test_future_year_is_new(self, current_year):
        assert estimate_used_value(30000, current_year + 1, current_year) == 30000


class TestPriceCategory:
    @pytest.mark.parametrize(
        "msrp,category",
        [
            (18000, "Budget"),
            (25000, "Affordable"),
            (34999, "Affordable"),
            (49999, "Mid-range"),
            (60000, "Premium"),
            (120000, "Luxury"),
            (150000, "Exotic"),
        ],
    )
    def test_categories(self, msrp, category):
        assert price_category(msrp) == category
