from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_BUNDLED_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class CatalogConfig:
    data_dir: Path = Path(os.getenv("CARDAI_DATA_DIR", str(_BUNDLED_DATA_DIR)))
    cards_filename: str = "cards.json"
    benefits_filename: str = "benefits.json"
    places_filename: str = "places.json"
    cache_ttl: float = float(os.getenv("CARDAI_CACHE_TTL", "300"))
    cache_max_entries: int = 512
    max_benefit_results: int = 8
    max_place_results: int = 5
    max_nearby_places: int = 8
    max_card_ranking: int = 4

    @property
    def cards_path(self) -> Path:
        return self.data_dir / self.cards_filename

    @property
    def benefits_path(self) -> Path:
        return self.data_dir / self.benefits_filename

    @property
    def places_path(self) -> Path:
        return self.data_dir / self.places_filename


DEFAULT_CATALOG_CONFIG = CatalogConfig()
