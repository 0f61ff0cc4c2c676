from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


def _default_weights() -> dict[str, int]:
    return {
        "lounge": 25000,
        "valet": 20000,
        "airport": 20000,
        "hotel": 15000,
        "golf": 15000,
        "fnb": 10000,
        "cafe": 5000,
        "shopping": 5000,
        "points": 5000,
        "entertainment": 4000,
    }


@dataclass(frozen=True)
class ValuationConfig:
    """
    Business tuning values used to turn a benefit into a comparable score.

    These are product decisions, so they live here rather than in the
    estimator itself. Pass a custom instance to ``estimate_value`` or
    ``BenefitIndex`` to try out a different weighting.
    """

    category_weights: Mapping[str, int] = field(default_factory=_default_weights, hash=False)
    unlimited_markers: tuple[str, ...] = ("무제한", "PP")
    unlimited_bonus: int = 30000
    percent_multiplier: int = 200
    default_network_value: int = 10000

    def __post_init__(self) -> None:
        # Copied and wrapped so the weights cannot change after construction
        object.__setattr__(
            self, "category_weights", MappingProxyType(dict(self.category_weights))
        )


DEFAULT_VALUATION_CONFIG = ValuationConfig()


# Display metadata for benefit categories (emoji is used in ranking reasons).
CATEGORY_CONFIG: dict[str, dict[str, str]] = {
    "airport": {"emoji": "✈️", "label": "공항"},
    "valet": {"emoji": "🚗", "label": "발렛"},
    "lounge": {"emoji": "🛋️", "label": "라운지"},
    "fnb": {"emoji": "🍽️", "label": "다이닝"},
    "hotel": {"emoji": "🏨", "label": "호텔"},
    "golf": {"emoji": "⛳", "label": "골프"},
    "cafe": {"emoji": "☕", "label": "카페"},
    "shopping": {"emoji": "🛍️", "label": "쇼핑"},
    "points": {"emoji": "💰", "label": "포인트"},
    "entertainment": {"emoji": "🎬", "label": "문화"},
    "gas": {"emoji": "⛽", "label": "주유"},
    "insurance": {"emoji": "🛡️", "label": "보험"},
    "service": {"emoji": "📞", "label": "서비스"},
    "travel": {"emoji": "🧳", "label": "여행"},
}

NETWORK_EMOJI = "🌐"


def category_emoji(category: str | None) -> str:
    return CATEGORY_CONFIG.get(category or "", {}).get("emoji", "")
