"""Models for plant identification and care research results."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

SunlightLevel = Literal["low", "medium", "bright", "direct"]


class SpeciesCandidate(BaseModel):
    """Single candidate species suggested by the model."""

    species: str
    scientific_name: str
    confidence: float = Field(ge=0.0, le=1.0)
    description: str | None = None


class PlantIdentification(BaseModel):
    """Structured output for photo identification."""

    identified_species: str | None = None
    scientific_name: str | None = None
    confidence: float = Field(ge=0.0, le=1.0)
    suggestions: list[SpeciesCandidate] = Field(default_factory=list)


class CareResearch(BaseModel):
    """Care recommendations extracted from a single source."""

    source_name: str
    source_url: str
    has_watering_info: bool
    watering_frequency_days: float = Field(ge=0)
    has_fertilizing_info: bool
    fertilizing_frequency_days: float = Field(ge=0)
    has_light_info: bool
    sunlight_level: SunlightLevel
    has_humidity_info: bool
    humidity_preference: str
    has_temperature_info: bool
    temperature_range: str
    care_notes: str
    confidence: float = Field(ge=0.0, le=1.0)

    @property
    def info_count(self) -> int:
        """Number of care topics the source states explicitly."""
        return sum(
            (
                self.has_watering_info,
                self.has_fertilizing_info,
                self.has_light_info,
                self.has_humidity_info,
                self.has_temperature_info,
            )
        )

    def to_source(self) -> dict[str, object]:
        """Return the stored research source representation."""
        return {
            "name": self.source_name,
            "url": self.source_url,
            "recommendation": self.care_notes,
            "watering_frequency_days": self.watering_frequency_days,
            "fertilizing_frequency_days": self.fertilizing_frequency_days,
            "sunlight_level": self.sunlight_level,
            "humidity_preference": self.humidity_preference,
            "temperature_range": self.temperature_range,
        }


class CareRequirements(BaseModel):
    """Consolidated care requirements across sources."""

    watering_frequency_days: int
    fertilizing_frequency_days: int
    sunlight_level: SunlightLevel
    humidity_preference: str
    temperature_range: str
    care_notes: str


@dataclass(frozen=True)
class SearchResult:
    """Web search hit used as research input."""

    title: str
    url: str
    snippet: str
