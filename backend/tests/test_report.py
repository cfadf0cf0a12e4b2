"""
Tests for the vehicle report facade and vehicle comparison.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from carscore.core.exceptions import InvalidInputException
from carscore.core.logging import request_id_var
from carscore.schemas import LemonRisk, Verdict, VehicleAttributes
from carscore.services.report_service import build_vehicle_report, compare_vehicles


class TestBuildVehicleReport:
    """Full pipeline for one vehicle."""

    def test_raw_nhtsa_rows(self, sample_vehicle, sample_complaints_raw, sample_recalls_raw, current_year):
        report = build_vehicle_report(
            sample_vehicle, sample_complaints_raw, sample_recalls_raw, current_year=current_year
        )
        reliability = report.reliability

        assert reliability.complaint_count == 3
        assert reliability.recall_count == 1
        assert reliability.component("Engine").score == 9.3
        assert reliability.component("Brakes").score == 9.3
        assert reliability.component("Electrical").score == 9.4
        assert reliability.overall == 9.0
        assert reliability.lemon_year_risk == LemonRisk.LOW
        assert reliability.severity_breakdown.critical == 1
        assert reliability.severity_breakdown.major == 1
        assert reliability.severity_breakdown.minor == 1
        assert report.score_label == "Excellent"

    def test_common_problems_and_verdict(self, sample_vehicle, sample_complaints_raw, current_year):
        report = build_vehicle_report(sample_vehicle, sample_complaints_raw, [], current_year=current_year)

        labels = [p.component for p in report.common_problems]
        assert labels == ["Electrical", "Brakes", "Hydraulic", "Engine"]
        assert all(p.percentage == 33 for p in report.common_problems)
        # Brakes, Hydraulic and Engine are all flagged severe
        assert report.pros_cons.verdict == Verdict.AVOID
        assert "Good fuel economy (32 MPG combined)" in report.pros_cons.pros
        assert "Safety concerns reported with: Brakes, Hydraulic, Engine" in report.pros_cons.cons

    def test_what_breaks(self, sample_vehicle, sample_complaints_raw, current_year):
        report = build_vehicle_report(sample_vehicle, sample_complaints_raw, [], current_year=current_year)
        assert [e.category for e in report.what_breaks] == ["Engine", "Electrical", "Brakes"]

    def test_estimated_price_and_cost(self, sample_vehicle, sample_complaints_raw, current_year):
        report = build_vehicle_report(sample_vehicle, sample_complaints_raw, [], current_year=current_year)

        assert report.pricing is not None
        assert report.price_used == report.pricing.base_price == 26500
        assert report.complaint_rate == pytest.approx(0.6)

        cost = report.ownership_cost
        assert cost.fuel_cost == 1313
        assert cost.insurance_cost == 1216
        assert cost.maintenance_cost == 540
        assert cost.repair_cost == 290
        assert cost.depreciation == 2650
        assert cost.total_annual_cost == 6009
        assert cost.five_year_cost == 28543
        assert report.cost_rating == "B"

    def test_empty_inputs(self, sample_vehicle, current_year):
        report = build_vehicle_report(sample_vehicle, [], [], current_year=current_year)
        assert report.reliability.overall == 9.5
        assert report.reliability.lemon_year_risk == LemonRisk.LOW
        assert report.common_problems == []
        assert report.what_breaks == []
        assert report.pros_cons.verdict == Verdict.RECOMMENDED

    def test_none_collections_treated_as_empty(self, sample_vehicle, current_year):
        report = build_vehicle_report(sample_vehicle, None, None, current_year=current_year)
        assert report.reliability.complaint_count == 0

    def test_known_msrp_skips_estimate(self, current_year):
        vehicle = {"year": 2023, "make": "Honda", "model": "Accord", "msrp": 30000, "comb08": 30,
                   "VClass": "Midsize Cars", "fuelType": "Regular Gasoline"}
        report = build_vehicle_report(vehicle, [], [], fuel_prices={"regular": 3.5},
                                      current_year=current_year)
        assert report.pricing is None
        assert report.price_used == 30000
        assert report.ownership_cost.fuel_cost == 1400
        assert report.ownership_cost.insurance_cost == 1260

    def test_no_mpg_skips_cost(self, current_year):
        vehicle = VehicleAttributes(year=2021, make="Ford", model="F-250")
        report = build_vehicle_report(vehicle, [], [], current_year=current_year)
        assert report.ownership_cost is None
        assert report.cost_rating is None
        # 29000 * 1.50 * 0.95
        assert report.pricing.base_price == 41300

    def test_missing_class_defaults_to_midsize(self, current_year):
        vehicle = VehicleAttributes(year=2023, make="Honda", model="Accord", msrp=30000, combined_mpg=30)
        report = build_vehicle_report(vehicle, [], [], fuel_prices={"regular": 3.5},
                                      current_year=current_year)
        assert report.ownership_cost.maintenance_cost == 540

    def test_electric_vehicle(self, current_year):
        vehicle = VehicleAttributes(year=2023, make="Tesla", model="Model 3", combined_mpg=130,
                                    fuel_type="Electricity", vehicle_class="Midsize Cars")
        report = build_vehicle_report(vehicle, [], [], fuel_prices={"electric": 0.15},
                                      current_year=current_year)
        assert report.ownership_cost.fuel_cost == 514

    def test_invalid_annual_miles(self, sample_vehicle):
        with pytest.raises(InvalidInputException) as exc_info:
            build_vehicle_report(sample_vehicle, [], [], annual_miles=-100)
        assert exc_info.value.field == "annual_miles"

    @pytest.mark.parametrize("msrp", [-5, "expensive", float("inf")])
    def test_invalid_msrp(self, msrp, current_year):
        vehicle = {"year": 2023, "make": "Honda", "model": "Accord", "msrp": msrp, "combined_mpg": 30}
        with pytest.raises(InvalidInputException) as exc_info:
            build_vehicle_report(vehicle, [], [], current_year=current_year)
        assert exc_info.value.field == "msrp"
        assert exc_info.value.kind == "InvalidInput"

    def test_unvalidated_vehicle_msrp_rechecked(self, current_year):
        vehicle = VehicleAttributes.model_construct(year=2023, make="Honda", model="Accord", msrp=-1)
        with pytest.raises(InvalidInputException):
            build_vehicle_report(vehicle, [], [], current_year=current_year)

    def test_non_numeric_sales_volume_uses_default(self, sample_vehicle, sample_complaints_raw,
                                                   current_year):
        report = build_vehicle_report(sample_vehicle, sample_complaints_raw, [],
                                      sales_volume="unknown", current_year=current_year)
        assert report.complaint_rate == pytest.approx(0.6)

    def test_custom_sales_volume(self, sample_vehicle, sample_complaints_raw, current_year):
        report = build_vehicle_report(sample_vehicle, sample_complaints_raw, [],
                                      sales_volume=5000, current_year=current_year)
        assert report.complaint_rate == pytest.approx(6.0)

    def test_inputs_not_mutated(self, sample_vehicle, sample_complaints_raw, current_year):
        snapshot = [dict(row) for row in sample_complaints_raw]
        build_vehicle_report(sample_vehicle, sample_complaints_raw, [], current_year=current_year)
        assert sample_complaints_raw == snapshot

    def test_idempotent_and_thread_safe(self, sample_vehicle, sample_complaints_raw,
                                        sample_recalls_raw, current_year):
        def run(_):
            return build_vehicle_report(
                sample_vehicle, sample_complaints_raw, sample_recalls_raw, current_year=current_year
            )

        expected = run(None)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(run, range(16)))
        assert all(r == expected for r in results)


class TestReportLogging:
    def test_request_id_bound_during_scoring(self, sample_vehicle, caplog, current_year):
        caplog.set_level(logging.INFO, logger="carscore")
        build_vehicle_report(sample_vehicle, [], [], current_year=current_year)

        scoring_logs = [r for r in caplog.records if r.name.startswith("carscore.services")]
        assert scoring_logs
        assert request_id_var.get() is None

    def test_performance_logged(self, sample_vehicle, caplog, current_year):
        caplog.set_level(logging.DEBUG, logger="carscore.performance")
        build_vehicle_report(sample_vehicle, [], [], current_year=current_year)

        perf = [r for r in caplog.records if r.name == "carscore.performance"]
        assert any("vehicle_report" in r.getMessage() for r in perf)


class TestCompareVehicles:
    def test_rows_and_costs(self, sample_vehicle, sample_complaints_raw, current_year):
        with_cost = build_vehicle_report(sample_vehicle, sample_complaints_raw, [],
                                         current_year=current_year)
        clean = build_vehicle_report(
            {"year": 2023, "make": "Honda", "model": "Accord", "msrp": 30000, "combined_mpg": 30,
             "vehicle_class": "Midsize Cars"},
            [], [], fuel_prices={"regular": 3.5}, current_year=current_year,
        )
        no_cost = build_vehicle_report({"year": 2020, "make": "Ford", "model": "F-250"}, [], [],
                                       current_year=current_year)

        comparison = compare_vehicles([with_cost, clean, no_cost])
        rows = comparison.vehicles

        assert [r.model for r in rows] == ["Camry", "Accord", "F-250"]
        assert rows[0].top_problems == ["Electrical", "Brakes", "Hydraulic"]
        assert rows[0].verdict == Verdict.AVOID
        assert rows[1].verdict == Verdict.RECOMMENDED
        assert rows[2].total_annual_cost is None
        assert rows[0].severity_breakdown.critical == 1

        cheapest = min(with_cost.ownership_cost.total_annual_cost, clean.ownership_cost.total_annual_cost)
        assert comparison.costs.cheapest == cheapest
        assert comparison.costs.most_expensive == max(
            with_cost.ownership_cost.total_annual_cost, clean.ownership_cost.total_annual_cost
        )

    def test_empty(self):
        comparison = compare_vehicles([])
        assert comparison.vehicles == []
        assert comparison.costs.average_annual == 0
