from __future__ import annotations

import logging
import time

from fastapi import HTTPException

from ..engine.ranking import best_card, calculate_ranking
from ..search.query import expand_search_query, find_tag
from .cache import cache_get, cache_set
from .data_store import get_config, get_index, get_places, search_places
from .models import (
    BenefitsRequest,
    BenefitsResponse,
    RankingRequest,
    RankingResponse,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger(__name__)


def get_ranking(request: RankingRequest) -> RankingResponse:
    start_time = time.time()
    config = get_config()

    # --- Cache check ---
    request_dict = request.model_dump()
    cached = cache_get(request_dict, ttl=config.cache_ttl)
    if cached is not None:
        return cached

    # --- Place resolution ---
    place = None
    if request.place_id is not None:
        place = get_places().get(request.place_id)
        if place is None:
            raise HTTPException(status_code=404, detail=f"Unknown place: {request.place_id}")
        place_tags = list(place.tags)
    else:
        place_tags = list(request.place_tags or [])

    # --- Ranking ---
    index = get_index()
    ranking = calculate_ranking(index, request.card_ids, place_tags)

    response = RankingResponse(
        place=place,
        place_tags=place_tags,
        ranking=ranking[: request.limit or config.max_card_ranking],
        best=best_card(ranking),
        universal=index.get_universal(request.card_ids),
        total_ranked=len(ranking),
    )

    cache_set(request_dict, response, max_entries=config.cache_max_entries)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.debug(
        "Ranked %d cards for %s in %.1fms",
        len(ranking), request.place_id or place_tags, elapsed_ms,
    )
    return response


def search(request: SearchRequest) -> SearchResponse:
    query = request.query.lower().strip()
    tag = find_tag(query)
    terms = expand_search_query(query)

    config = get_config()
    benefits = get_index().search(
        request.card_ids, tag, terms, limit=config.max_benefit_results
    )
    places = search_places(query, limit=config.max_place_results)
    return SearchResponse(tag=tag, terms=terms, places=places, benefits=benefits)


def list_benefits(request: BenefitsRequest) -> BenefitsResponse:
    index = get_index()
    return BenefitsResponse(
        grouped=index.get_grouped_by_category(request.card_ids),
        universal=index.get_universal(request.card_ids),
    )
