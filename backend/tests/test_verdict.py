"""
Tests for pros/cons generation and the buy verdict.
"""

import pytest

from carscore.schemas import CommonProblem, Verdict
from carscore.services.verdict_service import decide_verdict, generate_pros_and_cons


def problem(component, percentage=10, crash=False, fire=False, injury=False):
    return CommonProblem(
        component=component,
        count=1,
        percentage=percentage,
        has_crashes=crash,
        has_fires=fire,
        has_injuries=injury,
    )


class TestReliabilityAxis:
    @pytest.mark.parametrize(
        "score,pro",
        [
            (9.5, "Excellent reliability record with minimal reported issues"),
            (8.2, "Good reliability with few significant problems"),
            (7.1, "Above-average reliability for its class"),
        ],
    )
    def test_pros(self, score, pro):
        summary = generate_pros_and_cons(score, 10, 1, None, [])
        assert summary.pros[0] == pro

    def test_low_score_con(self):
        summary = generate_pros_and_cons(5.5, 10, 1, None, [])
        assert "Below-average reliability - consider extended warranty" in summary.cons

    def test_middle_score_no_reliability_strings(self):
        summary = generate_pros_and_cons(6.5, 10, 1, None, [])
        assert summary.pros == []
        assert summary.cons == []


class TestCountAxes:
    def test_no_complaints_no_recalls(self):
        summary = generate_pros_and_cons(9.5, 0, 0, None, [])
        assert "No complaints reported to NHTSA" in summary.pros
        assert "No safety recalls issued" in summary.pros

    def test_few_complaints(self):
        summary = generate_pros_and_cons(9.5, 5, 1, None, [])
        assert "Very few owner complaints reported" in summary.pros

    def test_many_complaints_and_recalls(self):
        summary = generate_pros_and_cons(6.5, 51, 4, None, [])
        assert "High number of complaints (51) reported to NHTSA" in summary.cons
        assert "Multiple safety recalls (4) - verify repairs completed" in summary.cons

    def test_thresholds_exclusive(self):
        summary = generate_pros_and_cons(6.5, 50, 3, None, [])
        assert summary.pros == []
        assert summary.cons == []


class TestFuelEconomyAxis:
    @pytest.mark.parametrize(
        "mpg,text,kind",
        [
            (35, "Excellent fuel economy (35 MPG combined)", "pros"),
            (28, "Good fuel economy (28 MPG combined)", "pros"),
            (29.5, "Good fuel economy (29.5 MPG combined)", "pros"),
            (17, "Poor fuel economy (17 MPG combined)", "cons"),
        ],
    )
    def test_mpg(self, mpg, text, kind):
        summary = generate_pros_and_cons(6.5, 10, 1, mpg, [])
        assert getattr(summary, kind) == [text]

    @pytest.mark.parametrize("mpg", [None, 0, -3, 22])
    def test_unknown_or_average_mpg_ignored(self, mpg):
        summary = generate_pros_and_cons(6.5, 10, 1, mpg, [])
        assert summary.pros == [] and summary.cons == []


class TestProblemAxes:
    def test_safety_con_names_severe_clusters(self):
        problems = [problem("Engine", fire=True), problem("Seats"), problem("Airbags", injury=True)]
        summary = generate_pros_and_cons(6.5, 10, 1, None, problems)
        assert "Safety concerns reported with: Engine, Airbags" in summary.cons

    def test_frequent_con_uses_top_three_only(self):
        problems = [
            problem("Transmission", 40),
            problem("Electrical", 10),
            problem("Brakes", 15),
            problem("Tires", 30),
        ]
        summary = generate_pros_and_cons(6.5, 10, 1, None, problems)
        assert summary.cons == ["Common issues: Transmission, Brakes"]


class TestVerdict:
    def test_zero_input_recommended(self):
        summary = generate_pros_and_cons(9.5, 0, 0, None, [])
        assert summary.verdict == Verdict.RECOMMENDED

    def test_good_score_no_severe_recommended(self):
        assert generate_pros_and_cons(8.0, 10, 1, 30, []).verdict == Verdict.RECOMMENDED

    def test_low_score_avoid_regardless_of_clusters(self):
        assert generate_pros_and_cons(4.5, 10, 1, None, []).verdict == Verdict.AVOID
        severe = [problem("Engine", fire=True)]
        assert generate_pros_and_cons(4.5, 10, 1, None, severe).verdict == Verdict.AVOID

    def test_one_severe_cluster_caution(self):
        severe = [problem("Engine", fire=True)]
        assert generate_pros_and_cons(9.0, 10, 1, None, severe).verdict == Verdict.CAUTION

    def test_two_severe_clusters_avoid(self):
        severe = [problem("Engine", fire=True), problem("Brakes", crash=True)]
        assert generate_pros_and_cons(9.0, 10, 1, None, severe).verdict == Verdict.AVOID

    @pytest.mark.parametrize(
        "score,severe,expected",
        [
            (7.5, 0, Verdict.RECOMMENDED),
            (7.4, 0, Verdict.CAUTION),
            (5.0, 1, Verdict.CAUTION),
            (4.9, 0, Verdict.AVOID),
        ],
    )
    def test_decide_verdict(self, score, severe, expected):
        assert decide_verdict(score, severe) == expected
