"""Data schemas for the TravelSynth application."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_URL_SLOTS = 5
DEFAULT_URL_SLOTS = 3


class BudgetLevel(str, Enum):
    ECONOMY = "Economy"
    COMFORT = "Comfort"
    LUXURY = "Luxury"


class TravelSeason(str, Enum):
    OFF_PEAK = "Off-peak"
    SHOULDER = "Shoulder"
    PEAK = "Peak"


class CompanionType(str, Enum):
    SOLO = "Solo"
    COUPLE = "Couple"
    FAMILY = "Family"
    FRIENDS = "Friends"


class TravelPreferences(BaseModel):
    """Trip preferences supplied alongside the source URLs.

    Every enumerated field is independently optional; a blank string from a
    form select is treated as unset.
    """

    budget: Optional[BudgetLevel] = None
    season: Optional[TravelSeason] = None
    companion: Optional[CompanionType] = None
    additional_notes: str = ""

    model_config = ConfigDict(frozen=True)

    @field_validator("budget", "season", "companion", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("additional_notes", mode="before")
    @classmethod
    def _notes_default(cls, value: object) -> object:
        return "" if value is None else value


class GroundingSource(BaseModel):
    """A web resource cited by the generation service."""

    title: str
    uri: str

    model_config = ConfigDict(frozen=True)

    @property
    def hostname(self) -> str:
        return urlparse(self.uri).hostname or self.uri


class TravelGuideResponse(BaseModel):
    """The markdown guide and the unique sources it was grounded on."""

    markdown_content: str
    sources: Tuple[GroundingSource, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)


__all__ = [
    "BudgetLevel",
    "CompanionType",
    "DEFAULT_URL_SLOTS",
    "GroundingSource",
    "MAX_URL_SLOTS",
    "TravelGuideResponse",
    "TravelPreferences",
    "TravelSeason",
]
