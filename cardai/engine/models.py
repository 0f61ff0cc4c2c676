from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Card(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    issuer: str = ""
    name: str = ""
    short_name: str = Field(default="", alias="shortName")
    network: str | None = None
    grade: str | None = None
    color: str | None = None
    annual_fee: str | None = Field(default=None, alias="annualFee")
    discontinued: bool = False

    @field_validator("annual_fee", mode="before")
    @classmethod
    def _fee_as_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)):
            return str(v)
        return v


class BenefitScope(str, Enum):
    universal = "universal"
    tagged = "tagged"


class Benefit(BaseModel):
    model_config = _MODEL_CONFIG

    id: str = ""
    card_id: str = Field(..., alias="cardId")
    category: str | None = None
    title: str = ""
    value: str | None = None
    desc: str = ""
    conditions: str | None = None
    place_tags: tuple[str, ...] = Field(default=(), alias="placeTags")
    limit: str | None = None

    @field_validator("value", "limit", mode="before")
    @classmethod
    def _number_as_text(cls, v: Any) -> Any:
        # Display strings occasionally arrive as bare numbers in the data files.
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("place_tags", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return () if v is None else v

    @property
    def scope(self) -> BenefitScope:
        """Universal benefits apply at any place; tagged ones only where a tag matches."""
        return BenefitScope.tagged if self.place_tags else BenefitScope.universal


class EnrichedBenefit(Benefit):
    card: Card | None = None
    estimated_value: int = Field(default=0, alias="estimatedValue")


class Place(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""
    type: str | None = None
    lat: float | None = None
    lng: float | None = None
    tags: tuple[str, ...] = ()


class NetworkBenefitTemplate(BaseModel):
    model_config = _MODEL_CONFIG

    icon: str = ""
    title: str
    tags: tuple[str, ...] = ()
    value: int | None = None
    desc: str = ""


class NetworkBenefit(NetworkBenefitTemplate):
    card: Card
    network: str
    grade: str
    estimated_value: int = Field(default=0, alias="estimatedValue")


class BenefitSummaryItem(BaseModel):
    model_config = _MODEL_CONFIG

    emoji: str | None = None
    title: str
    value: str | None = None


class RankedCard(BaseModel):
    model_config = _MODEL_CONFIG

    card: Card
    total_value: int = Field(default=0, alias="totalValue")
    count: int = 0
    reasons: list[str] = Field(default_factory=list)
    benefit_ids: list[str] = Field(default_factory=list, alias="benefitIds")
    benefit_summary: list[BenefitSummaryItem] = Field(default_factory=list, alias="benefitSummary")
    caveats: list[str] = Field(default_factory=list)


class BestCard(BaseModel):
    model_config = _MODEL_CONFIG

    ranked: RankedCard
    diff: int = 0
