from __future__ import annotations

from fastapi import FastAPI, Query

from .recommendations.cache import get_cache_stats
from .recommendations.data_store import get_cards, nearby_places
from .recommendations.models import (
    BenefitsRequest,
    BenefitsResponse,
    CardListResponse,
    NearbyPlace,
    RankingRequest,
    RankingResponse,
    SearchRequest,
    SearchResponse,
)
from .recommendations.service import get_ranking, list_benefits, search

app = FastAPI(title="Card Benefit Recommendation API", version="1.0.0")


# ── Catalogue ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/cards", response_model=CardListResponse)
def cards(issuer: str | None = None) -> CardListResponse:
    result = [
        c for c in get_cards().values()
        if not c.discontinued and (issuer is None or c.issuer == issuer)
    ]
    return CardListResponse(cards=result)


@app.get("/places/nearby", response_model=list[NearbyPlace])
def places_nearby(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lng: float = Query(..., ge=-180.0, le=180.0),
    limit: int | None = Query(default=None, ge=1, le=50),
) -> list[NearbyPlace]:
    return [
        NearbyPlace(place=place, distance_m=round(distance, 1))
        for place, distance in nearby_places(lat, lng, limit)
    ]


# ── Recommendations ──────────────────────────────────────────────────────


@app.post("/ranking", response_model=RankingResponse)
def ranking(body: RankingRequest) -> RankingResponse:
    return get_ranking(body)


@app.post("/search", response_model=SearchResponse)
def benefit_search(body: SearchRequest) -> SearchResponse:
    return search(body)


@app.post("/benefits", response_model=BenefitsResponse)
def benefits(body: BenefitsRequest) -> BenefitsResponse:
    return list_benefits(body)


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
