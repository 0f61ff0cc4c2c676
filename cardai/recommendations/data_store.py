from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..engine.index import BenefitIndex
from ..engine.models import Benefit, Card, Place
from ..search.query import find_tag
from .cache import clear_cache
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig

logger = logging.getLogger(__name__)

_EARTH_RADIUS_M = 6371000.0

_config: CatalogConfig = DEFAULT_CATALOG_CONFIG
_cards: dict[str, Card] | None = None
_benefits: dict[str, Benefit] | None = None
_places: dict[str, Place] | None = None
_index: BenefitIndex | None = None
_places_df: pd.DataFrame | None = None


def _read_json(path: Path) -> dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain an object keyed by id")
    return data


def normalize_place(place_id: str, raw: dict[str, Any]) -> Place:
    """Make sure a place's own id and type are among its tags (order kept, no duplicates)."""
    tags = list(raw.get("tags") or [])
    tags.extend(t for t in (place_id, raw.get("type")) if t)
    return Place.model_validate({**raw, "id": place_id, "tags": tuple(dict.fromkeys(tags))})


def _load() -> None:
    global _cards, _benefits, _places
    config = _config
    _cards = {
        cid: Card.model_validate({**raw, "id": cid})
        for cid, raw in _read_json(config.cards_path).items()
    }
    _benefits = {
        bid: Benefit.model_validate({**raw, "id": bid})
        for bid, raw in _read_json(config.benefits_path).items()
    }
    _places = {
        pid: normalize_place(pid, raw)
        for pid, raw in _read_json(config.places_path).items()
    }
    logger.info(
        "Loaded catalogue from %s: %d cards, %d benefits, %d places",
        config.data_dir, len(_cards), len(_benefits), len(_places),
    )


def get_config() -> CatalogConfig:
    """The catalogue config currently in effect (see ``reload_catalog``)."""
    return _config


def get_cards() -> dict[str, Card]:
    if _cards is None:
        _load()
    return _cards


def get_benefits() -> dict[str, Benefit]:
    if _benefits is None:
        _load()
    return _benefits


def get_places() -> dict[str, Place]:
    if _places is None:
        _load()
    return _places


def get_index() -> BenefitIndex:
    """Return the benefit index, building it on first call."""
    global _index
    if _index is None:
        _index = BenefitIndex(get_benefits(), get_cards())
    return _index


def get_places_dataframe() -> pd.DataFrame:
    """Return the place catalogue as a DataFrame, loading it on first call."""
    global _places_df
    if _places_df is None:
        rows = [p.model_dump() for p in get_places().values()]
        df = pd.DataFrame(rows, columns=["id", "name", "type", "lat", "lng", "tags"])
        df["name_lower"] = df["name"].fillna("").str.lower()
        _places_df = df
    return _places_df


def reload_catalog(config: CatalogConfig | None = None) -> None:
    """
    Drop everything loaded so far; the next access reads the data files again
    and rebuilds the index from scratch.
    """
    global _config, _cards, _benefits, _places, _index, _places_df
    if config is not None:
        _config = config
    _cards = _benefits = _places = None
    _index = None
    _places_df = None
    clear_cache()
    logger.info("Catalogue reset; next access reloads from %s", _config.data_dir)


def haversine_distances(lat: float, lng: float, lats: np.ndarray, lngs: np.ndarray) -> np.ndarray:
    """Great-circle distances in metres from one point to arrays of points."""
    lat1, lng1 = np.radians(lat), np.radians(lng)
    lat2, lng2 = np.radians(lats), np.radians(lngs)
    a = (
        np.sin((lat2 - lat1) / 2) ** 2
        + np.cos(lat1) * np.cos(lat2) * np.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * _EARTH_RADIUS_M * np.arcsin(np.sqrt(a))


def nearby_places(
    lat: float, lng: float, limit: int | None = None
) -> list[tuple[Place, float]]:
    """Places ordered by distance from (lat, lng). Places without coordinates are skipped."""
    if limit is None:
        limit = _config.max_nearby_places
    df = get_places_dataframe().dropna(subset=["lat", "lng"])
    if df.empty:
        return []
    distances = haversine_distances(
        lat, lng, df["lat"].to_numpy(dtype=float), df["lng"].to_numpy(dtype=float)
    )
    order = np.argsort(distances, kind="stable")[:limit]
    places = get_places()
    ids = df["id"].to_numpy()
    return [(places[ids[i]], float(distances[i])) for i in order]


def search_places(query: str, limit: int | None = None) -> list[Place]:
    if limit is None:
        limit = _config.max_place_results
    q = query.lower().strip()
    if not q:
        return []
    tag = find_tag(q)
    df = get_places_dataframe()
    mask = df["name_lower"].str.contains(q, regex=False) | df["tags"].apply(lambda t: tag in t)
    places = get_places()
    return [places[pid] for pid in df.loc[mask, "id"].head(limit)]
