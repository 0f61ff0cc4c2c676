from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from ..engine.models import BestCard, Card, EnrichedBenefit, Place, RankedCard


class RankingRequest(BaseModel):
    card_ids: list[str] = Field(default_factory=list, description="Cards the user holds")
    place_id: str | None = Field(default=None, description="Selected place from the catalogue")
    place_tags: list[str] | None = Field(
        default=None, description="Tags of a place not in the catalogue"
    )
    limit: int | None = Field(
        default=None, ge=1, le=50, description="Defaults to the catalogue's max_card_ranking"
    )

    @model_validator(mode="after")
    def _needs_place(self) -> "RankingRequest":
        if self.place_id is None and self.place_tags is None:
            raise ValueError("either place_id or place_tags is required")
        return self


class RankingResponse(BaseModel):
    place: Place | None = None
    place_tags: list[str]
    ranking: list[RankedCard]
    best: BestCard | None = None
    universal: list[EnrichedBenefit] = Field(default_factory=list)
    total_ranked: int


class SearchRequest(BaseModel):
    card_ids: list[str] = Field(default_factory=list)
    query: str = Field(..., min_length=1, max_length=100)


class SearchResponse(BaseModel):
    tag: str
    terms: list[str]
    places: list[Place]
    benefits: list[EnrichedBenefit]


class BenefitsRequest(BaseModel):
    card_ids: list[str] = Field(default_factory=list)


class BenefitsResponse(BaseModel):
    grouped: dict[str, list[EnrichedBenefit]]
    universal: list[EnrichedBenefit]


class NearbyPlace(BaseModel):
    place: Place
    distance_m: float


class CardListResponse(BaseModel):
    cards: list[Card]
