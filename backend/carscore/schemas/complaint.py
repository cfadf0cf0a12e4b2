"""
Complaint and recall input records.

Both models accept snake_case names as well as the raw keys returned by the
NHTSA complaints and recalls APIs, so rows from the upstream source can be
validated directly.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_flag(value: Any) -> bool:
    """NHTSA reports crash/fire as "Y"/"N"."""
    if isinstance(value, str):
        return value.strip().upper() in ("Y", "YES", "TRUE", "1")
    return bool(value)


def _as_count(value: Any) -> int:
    """Missing or negative counts become zero."""
    if value is None or value == "":
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class ComplaintRecord(BaseModel):
    """A single owner complaint filed with NHTSA."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    odi_number: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("odi_number", "odiNumber", "id"),
        description="ODI number",
    )
    date_filed: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("date_filed", "dateComplaintFiled", "date"),
        description="Date complaint was filed",
    )
    components: str = Field(
        "",
        validation_alias=AliasChoices("components", "component"),
        description="Affected components, comma separated",
    )
    crash: bool = Field(False, description="Whether a crash occurred")
    fire: bool = Field(False, description="Whether a fire occurred")
    injuries: int = Field(
        0,
        validation_alias=AliasChoices("injuries", "numberOfInjuries"),
        description="Number of injuries reported",
    )
    deaths: int = Field(
        0,
        validation_alias=AliasChoices("deaths", "numberOfDeaths"),
        description="Number of deaths reported",
    )
    summary: str = Field("", description="Complaint description")

    @field_validator("odi_number", "date_filed", mode="before")
    @classmethod
    def stringify(cls, v):
        if v is None:
            return None
        return str(v)

    @field_validator("components", "summary", mode="before")
    @classmethod
    def default_text(cls, v):
        return _as_text(v)

    @field_validator("crash", "fire", mode="before")
    @classmethod
    def parse_flag(cls, v):
        return _as_flag(v)

    @field_validator("injuries", "deaths", mode="before")
    @classmethod
    def parse_count(cls, v):
        return _as_count(v)


class RecallRecord(BaseModel):
    """A safety recall campaign."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    campaign_number: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "campaign_number", "NHTSACampaignNumber", "nhtsaCampaignNumber", "campaignNumber"
        ),
        description="NHTSA campaign number",
    )
    report_date: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "report_date", "ReportReceivedDate", "reportReceivedDate", "date"
        ),
        description="Date the recall was reported",
    )
    component: str = Field(
        "",
        validation_alias=AliasChoices("component", "Component"),
        description="Affected component",
    )
    summary: str = Field(
        "",
        validation_alias=AliasChoices("summary", "Summary"),
        description="Brief summary of the recall",
    )
    consequence: str = Field(
        "",
        validation_alias=AliasChoices("consequence", "Consequence"),
        description="Potential consequence of the defect",
    )
    remedy: str = Field(
        "",
        validation_alias=AliasChoices("remedy", "Remedy"),
        description="Manufacturer's remedy",
    )
    possibly_affected: int = Field(
        0,
        validation_alias=AliasChoices(
            "possibly_affected", "PotentialNumberofUnitsAffected", "possiblyAffected"
        ),
        description="Number of units possibly affected",
    )

    @field_validator("campaign_number", "report_date", mode="before")
    @classmethod
    def stringify(cls, v):
        if v is None:
            return None
        return str(v)

    @field_validator("component", "summary", "consequence", "remedy", mode="before")
    @classmethod
    def default_text(cls, v):
        return _as_text(v)

    @field_validator("possibly_affected", mode="before")
    @classmethod
    def parse_count(cls, v):
        return _as_count(v)
