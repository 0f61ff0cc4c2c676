"""
In-memory benefit index.

Built once per data load and read-only afterwards. Every bucket is sorted
by descending estimated value at build time (stable, so equal values keep
load order) and queries preserve that order. Missing keys never raise;
they just produce empty results.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .config import DEFAULT_VALUATION_CONFIG, ValuationConfig
from .models import Benefit, BenefitScope, Card, EnrichedBenefit
from .valuation import estimate_value

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 8

Bucket = tuple[EnrichedBenefit, ...]


def _by_value(benefits: Iterable[EnrichedBenefit]) -> list[EnrichedBenefit]:
    return sorted(benefits, key=lambda b: b.estimated_value, reverse=True)


def _as_card(card_id: str, raw: Card | Mapping[str, Any]) -> Card:
    if isinstance(raw, Card):
        return raw
    return Card.model_validate({"id": card_id, **raw})


def _as_benefit(raw: Benefit | Mapping[str, Any]) -> Benefit:
    if isinstance(raw, Benefit):
        return raw
    return Benefit.model_validate(raw)


class BenefitIndex:
    def __init__(
        self,
        benefits: Mapping[str, Benefit | Mapping[str, Any]],
        cards: Mapping[str, Card | Mapping[str, Any]],
        config: ValuationConfig = DEFAULT_VALUATION_CONFIG,
    ) -> None:
        self.config = config
        self._cards: dict[str, Card] = {cid: _as_card(cid, c) for cid, c in cards.items()}
        self._all: list[EnrichedBenefit] = []
        self._by_id: dict[str, EnrichedBenefit] = {}

        by_card: dict[str, list[EnrichedBenefit]] = {}
        by_category: dict[str, list[EnrichedBenefit]] = {}
        by_tag: dict[str, list[EnrichedBenefit]] = {}
        universal: list[EnrichedBenefit] = []
        orphans = 0

        for benefit_id, raw in benefits.items():
            benefit = _as_benefit(raw)
            card = self._cards.get(benefit.card_id)
            if card is None:
                orphans += 1
                logger.debug("Benefit %s references unknown card %s", benefit_id, benefit.card_id)

            data = benefit.model_dump(exclude={"card", "estimated_value"})
            data["id"] = benefit_id
            enriched = EnrichedBenefit(
                **data,
                card=card,
                estimated_value=estimate_value(benefit, config),
            )
            self._all.append(enriched)
            self._by_id[benefit_id] = enriched

            by_card.setdefault(enriched.card_id, []).append(enriched)
            if enriched.category:
                by_category.setdefault(enriched.category, []).append(enriched)
            if enriched.scope is BenefitScope.tagged:
                for tag in enriched.place_tags:
                    by_tag.setdefault(tag, []).append(enriched)
            else:
                universal.append(enriched)

        self.by_card_id: Mapping[str, Bucket] = MappingProxyType(
            {k: tuple(_by_value(v)) for k, v in by_card.items()}
        )
        self.by_category: Mapping[str, Bucket] = MappingProxyType(
            {k: tuple(_by_value(v)) for k, v in by_category.items()}
        )
        self.by_place_tag: Mapping[str, Bucket] = MappingProxyType(
            {k: tuple(_by_value(v)) for k, v in by_tag.items()}
        )
        self.universal: Bucket = tuple(_by_value(universal))

        logger.info(
            "Built benefit index: %d benefits, %d cards, %d categories, %d place tags, %d universal",
            len(self._all),
            len(self.by_card_id),
            len(self.by_category),
            len(self.by_place_tag),
            len(self.universal),
        )
        if orphans:
            logger.debug("%d benefits reference cards missing from the catalogue", orphans)

    def __len__(self) -> int:
        return len(self._all)

    def __contains__(self, benefit_id: object) -> bool:
        return benefit_id in self._by_id

    def get(self, benefit_id: str) -> EnrichedBenefit | None:
        return self._by_id.get(benefit_id)

    def card(self, card_id: str) -> Card | None:
        return self._cards.get(card_id)

    def cards_for(self, card_ids: Iterable[str]) -> list[Card]:
        """Resolve card ids to Card objects, skipping ids not in the catalogue."""
        return [self._cards[cid] for cid in card_ids if cid in self._cards]

    # ── Queries ──────────────────────────────────────────────────────────

    def get_by_card_ids(self, card_ids: Iterable[str]) -> list[EnrichedBenefit]:
        """All benefits of the given cards, grouped by card in the order given."""
        result: list[EnrichedBenefit] = []
        for card_id in card_ids:
            result.extend(self.by_card_id.get(card_id, ()))
        return result

    def get_by_place(
        self, card_ids: Iterable[str], place_tags: Iterable[str]
    ) -> list[EnrichedBenefit]:
        """
        Tagged benefits of ``card_ids`` that match any of ``place_tags``.

        A benefit matching several tags is returned once. The result is
        globally ordered by estimated value.
        """
        card_set = set(card_ids)
        seen: set[str] = set()
        result: list[EnrichedBenefit] = []
        for tag in place_tags:
            for b in self.by_place_tag.get(tag, ()):
                if b.card_id in card_set and b.id not in seen:
                    seen.add(b.id)
                    result.append(b)
        return _by_value(result)

    def get_universal(self, card_ids: Iterable[str]) -> list[EnrichedBenefit]:
        card_set = set(card_ids)
        return [b for b in self.universal if b.card_id in card_set]

    def get_grouped_by_category(
        self, card_ids: Iterable[str]
    ) -> dict[str, list[EnrichedBenefit]]:
        """Tagged benefits of ``card_ids`` per category. Universal benefits are left out."""
        card_set = set(card_ids)
        grouped: dict[str, list[EnrichedBenefit]] = {}
        for category, benefits in self.by_category.items():
            filtered = [
                b for b in benefits
                if b.card_id in card_set and b.scope is BenefitScope.tagged
            ]
            if filtered:
                grouped[category] = filtered
        return grouped

    def search(
        self,
        card_ids: Iterable[str],
        tag: str,
        expanded_terms: Iterable[str] | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[EnrichedBenefit]:
        """
        Find benefits of ``card_ids`` for a search.

        Structural matches come first: category equal to ``tag``, then a
        place tag equal to ``tag``. Only while fewer than ``limit`` are
        collected, titles are scanned (in load order) for any of
        ``expanded_terms``, case-insensitively.
        """
        card_set = set(card_ids)
        seen: set[str] = set()
        result: list[EnrichedBenefit] = []

        def collect(candidates: Iterable[EnrichedBenefit]) -> None:
            for b in candidates:
                if b.card_id in card_set and b.id not in seen:
                    seen.add(b.id)
                    result.append(b)

        collect(self.by_category.get(tag, ()))
        collect(self.by_place_tag.get(tag, ()))

        terms = [t.lower() for t in expanded_terms or () if t]
        if terms and len(result) < limit:
            for b in self._all:
                if len(result) >= limit:
                    break
                if b.card_id not in card_set or b.id in seen:
                    continue
                title = b.title.lower()
                if any(term in title for term in terms):
                    seen.add(b.id)
                    result.append(b)

        return _by_value(result)[:limit]


def build_index(
    benefits: Mapping[str, Benefit | Mapping[str, Any]],
    cards: Mapping[str, Card | Mapping[str, Any]],
    config: ValuationConfig = DEFAULT_VALUATION_CONFIG,
) -> BenefitIndex:
    return BenefitIndex(benefits, cards, config)
