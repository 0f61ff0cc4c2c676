from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .config import NETWORK_EMOJI, category_emoji
from .index import BenefitIndex
from .models import BenefitSummaryItem, BestCard, Card, RankedCard
from .networks import NETWORK_BENEFITS, NetworkTable, resolve_network_benefits

logger = logging.getLogger(__name__)


@dataclass
class _Score:
    card: Card | None
    total_value: int = 0
    count: int = 0
    reasons: list[str] = field(default_factory=list)
    benefit_ids: list[str] = field(default_factory=list)
    benefit_summary: list[BenefitSummaryItem] = field(default_factory=list)
    # dict keys double as an insertion-ordered set
    caveats: dict[str, None] = field(default_factory=dict)

    def to_ranked(self) -> RankedCard:
        return RankedCard(
            card=self.card,
            total_value=self.total_value,
            count=self.count,
            reasons=self.reasons,
            benefit_ids=self.benefit_ids,
            benefit_summary=self.benefit_summary,
            caveats=list(self.caveats),
        )


def calculate_ranking(
    index: BenefitIndex,
    card_ids: Sequence[str],
    place_tags: Sequence[str],
    network_templates: NetworkTable = NETWORK_BENEFITS,
    user_cards: Iterable[Card] | None = None,
) -> list[RankedCard]:
    """
    Rank the user's cards for a place by the summed value of what applies there.

    Card benefits come from ``index.get_by_place`` and network-tier benefits
    from ``resolve_network_benefits``. Cards with nothing applicable are
    absent from the result, and an empty list means the place offers no
    benefit at all for this card set. Ties keep the order in which cards
    were first encountered.
    """
    if user_cards is None:
        user_cards = index.cards_for(card_ids)

    place_benefits = index.get_by_place(card_ids, place_tags)
    net_benefits = resolve_network_benefits(
        user_cards,
        place_tags,
        network_templates,
        default_value=index.config.default_network_value,
    )

    if not place_benefits and not net_benefits:
        return []

    scores: dict[str, _Score] = {}

    for b in place_benefits:
        score = scores.setdefault(b.card_id, _Score(card=b.card))
        emoji = category_emoji(b.category)
        score.total_value += b.estimated_value
        score.count += 1
        score.benefit_ids.append(b.id)
        score.benefit_summary.append(
            BenefitSummaryItem(emoji=emoji or None, title=b.title, value=b.value)
        )
        score.reasons.append(f"{emoji} {b.title}".strip())
        if b.conditions:
            score.caveats[b.conditions] = None
        if b.limit:
            score.caveats[f"한도: {b.limit}"] = None

    for nb in net_benefits:
        score = scores.setdefault(nb.card.id, _Score(card=nb.card))
        if score.card is None:
            score.card = nb.card
        score.total_value += nb.estimated_value
        score.count += 1
        score.benefit_summary.append(
            BenefitSummaryItem(
                emoji=NETWORK_EMOJI,
                title=nb.title,
                value=f"{nb.estimated_value:,}원",
            )
        )
        score.reasons.append(f"{NETWORK_EMOJI} {nb.title}")

    ranked: list[RankedCard] = []
    for card_id, score in scores.items():
        if score.card is None:
            logger.debug("Dropping ranking entry for unknown card %s", card_id)
            continue
        ranked.append(score.to_ranked())

    return sorted(ranked, key=lambda r: r.total_value, reverse=True)


def best_card(ranking: Sequence[RankedCard]) -> BestCard | None:
    """Top card of a ranking and its margin over the runner-up."""
    if not ranking:
        return None
    best = ranking[0]
    diff = best.total_value - ranking[1].total_value if len(ranking) > 1 else 0
    return BestCard(ranked=best, diff=diff)
