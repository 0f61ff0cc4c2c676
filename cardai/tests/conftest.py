from __future__ import annotations

import pytest

from cardai.engine.index import BenefitIndex
from cardai.engine.models import Card
from cardai.recommendations.cache import clear_cache


@pytest.fixture
def cards() -> dict[str, Card]:
    return {
        "A": Card(id="A", issuer="현대카드", name="Card A", network="VISA", grade="Infinite"),
        "B": Card(id="B", issuer="삼성카드", name="Card B", network="Mastercard", grade="World"),
        "C": Card(id="C", issuer="신한카드", name="Card C", network="VISA", grade="Infinite"),
        "D": Card(id="D", issuer="KB국민카드", name="Card D", network="JCB", grade="Standard"),
    }


@pytest.fixture
def benefits() -> dict[str, dict]:
    return {
        "a-cafe": {
            "cardId": "A", "category": "cafe", "title": "카페 10% 할인",
            "value": "10%", "placeTags": ["cafe"],
        },
        "a-starbucks": {
            "cardId": "A", "category": "cafe", "title": "스타벅스 50% 할인",
            "value": "50%", "placeTags": ["cafe", "starbucks"], "limit": "월 1만원",
        },
        "a-lounge": {
            "cardId": "A", "category": "lounge", "title": "PP 라운지",
            "value": "무제한", "placeTags": ["airport", "lounge"],
            "conditions": "전월 실적 50만원 이상",
        },
        "a-points": {
            "cardId": "A", "category": "points", "title": "포인트 1% 적립",
            "value": "1%", "placeTags": [],
        },
        "b-universal": {
            "cardId": "B", "category": "shopping", "title": "온라인 쇼핑 5% 할인",
            "value": "5%",
        },
        "b-valet": {
            "cardId": "B", "category": "valet", "title": "호텔 발렛 무료",
            "value": "무료", "placeTags": ["hotel", "valet"],
            "conditions": "전월 실적 50만원 이상", "limit": "월 2회",
        },
        "c-cafe": {
            "cardId": "C", "category": "cafe", "title": "커피 10% 할인",
            "value": "10%", "placeTags": ["cafe"],
        },
        "ghost": {
            "cardId": "Z", "category": "cafe", "title": "단종 카드 카페 할인",
            "value": "30%", "placeTags": ["cafe"],
        },
    }


@pytest.fixture
def index(benefits, cards) -> BenefitIndex:
    return BenefitIndex(benefits, cards)


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_cache()
    yield
    clear_cache()
