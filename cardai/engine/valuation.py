from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .config import DEFAULT_VALUATION_CONFIG, ValuationConfig

_PERCENT_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%")


def _field(benefit: Any, name: str) -> Any:
    if isinstance(benefit, Mapping):
        return benefit.get(name)
    return getattr(benefit, name, None)


def estimate_value(benefit: Any, config: ValuationConfig = DEFAULT_VALUATION_CONFIG) -> int:
    """
    Estimate a benefit's monetary value in won for ranking purposes.

    ``benefit`` may be a ``Benefit`` model or any mapping carrying
    ``category`` and ``value``. The result is the category base weight,
    plus the unlimited bonus when the value text says "unlimited", or plus
    a per-point bonus when it carries a percentage. Anything unparsable
    simply gets no bonus.
    """
    category = _field(benefit, "category")
    base = config.category_weights.get(category, 0) if isinstance(category, str) else 0

    text = _field(benefit, "value")
    if not isinstance(text, str):
        return max(0, base)

    if any(marker in text for marker in config.unlimited_markers):
        return max(0, base + config.unlimited_bonus)

    match = _PERCENT_RE.search(text)
    if match:
        return max(0, base + int(float(match.group(1)) * config.percent_multiplier))

    return max(0, base)
