"""
Pytest configuration and fixtures for CarScore tests.
"""

import os
import sys
from pathlib import Path

# Add backend to path for imports
backend_path = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_path))

# Set environment variables for testing BEFORE any imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest

from carscore.schemas import ComplaintRecord, RecallRecord, VehicleAttributes

# Reference year for every year-dependent calculation in the tests
CURRENT_YEAR = 2024


@pytest.fixture
def current_year():
    """Fixed reference year so depreciation and pricing are deterministic."""
    return CURRENT_YEAR


@pytest.fixture
def make_complaint():
    """Factory for ComplaintRecord with sensible defaults."""
    counter = {"n": 0}

    def _make(
        components: str = "ENGINE",
        summary: str = "Engine stalls at highway speed.",
        crash: bool = False,
        fire: bool = False,
        injuries: int = 0,
        deaths: int = 0,
    ) -> ComplaintRecord:
        counter["n"] += 1
        return ComplaintRecord(
            odi_number=str(11000000 + counter["n"]),
            date_filed="01/15/2024",
            components=components,
            crash=crash,
            fire=fire,
            injuries=injuries,
            deaths=deaths,
            summary=summary,
        )

    return _make


@pytest.fixture
def make_recall():
    """Factory for RecallRecord with sensible defaults."""

    def _make(
        component: str = "AIR BAGS",
        possibly_affected: int = 0,
        summary: str = "Air bag inflator may rupture.",
    ) -> RecallRecord:
        return RecallRecord(
            campaign_number="24V001000",
            report_date="02/01/2024",
            component=component,
            summary=summary,
            consequence="Increased risk of injury.",
            remedy="Dealers will replace the inflator.",
            possibly_affected=possibly_affected,
        )

    return _make


@pytest.fixture
def sample_vehicle():
    """A 2023 Toyota Camry with EPA data."""
    return VehicleAttributes(
        year=2023,
        make="Toyota",
        model="Camry",
        trim="LE",
        vehicle_class="Midsize Cars",
        combined_mpg=32,
        fuel_type="Regular Gasoline",
    )


@pytest.fixture
def sample_complaints_raw():
    """Complaint rows as returned by the NHTSA complaints API."""
    return [
        {
            "odiNumber": 11500001,
            "dateComplaintFiled": "03/04/2023",
            "components": "ELECTRICAL SYSTEM",
            "crash": "N",
            "fire": "N",
            "numberOfInjuries": 0,
            "numberOfDeaths": 0,
            "summary": "Infotainment screen goes black while driving.",
        },
        {
            "odiNumber": 11500002,
            "dateComplaintFiled": "05/11/2023",
            "components": "SERVICE BRAKES, HYDRAULIC",
            "crash": "Y",
            "fire": "N",
            "numberOfInjuries": 1,
            "numberOfDeaths": 0,
            "summary": "Brake pedal went to the floor and the car rear-ended a truck.",
        },
        {
            "odiNumber": 11500003,
            "dateComplaintFiled": "07/21/2023",
            "components": "ENGINE",
            "crash": "N",
            "fire": "Y",
            "numberOfInjuries": 0,
            "numberOfDeaths": 0,
            "summary": "Smoke and flames from the engine bay after parking.",
        },
    ]


@pytest.fixture
def sample_recalls_raw():
    """Recall rows as returned by the NHTSA recalls API."""
    return [
        {
            "NHTSACampaignNumber": "23V123000",
            "ReportReceivedDate": "20/02/2023",
            "Component": "FUEL SYSTEM, GASOLINE",
            "Summary": "Fuel pump may fail.",
            "Consequence": "Engine stall increases the risk of a crash.",
            "Remedy": "Dealers will replace the fuel pump.",
            "PotentialNumberofUnitsAffected": 25000,
        },
    ]
