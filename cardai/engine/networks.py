from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from .config import DEFAULT_VALUATION_CONFIG
from .models import Card, NetworkBenefit, NetworkBenefitTemplate

NetworkTable = Mapping[str, Mapping[str, Sequence[NetworkBenefitTemplate]]]


def _t(icon: str, title: str, tags: list[str], value: int, desc: str) -> NetworkBenefitTemplate:
    return NetworkBenefitTemplate(icon=icon, title=title, tags=tuple(tags), value=value, desc=desc)


# Benefits granted by the card network and tier themselves, independent of
# the issuing bank's own catalogue. Keyed by network, then grade.
NETWORK_BENEFITS: dict[str, dict[str, list[NetworkBenefitTemplate]]] = {
    "VISA": {
        "Infinite": [
            _t("🛋️", "VISA 인피니트 라운지", ["airport", "lounge"], 50000,
               "전 세계 공항 VISA 제휴 라운지 무료 이용. 카드사별 횟수 제한 상이."),
            _t("📞", "VISA 컨시어지 24시간", ["hotel", "travel"], 30000,
               "24시간 프리미엄 컨시어지 서비스, 여행/호텔/레스토랑 예약 지원."),
            _t("🏨", "Luxury Hotel Collection", ["hotel"], 40000,
               "전 세계 900+ 럭셔리 호텔 특별 혜택 (조식, 업그레이드 등)."),
        ],
        "Signature": [
            _t("🛋️", "VISA 시그니처 라운지", ["airport", "lounge"], 20000,
               "VISA 제휴 공항 라운지 할인 이용."),
            _t("🛡️", "VISA 여행자 보험", ["airport", "travel"], 15000,
               "해외 결제 시 여행자보험 자동 가입."),
        ],
        "Platinum": [
            _t("🛡️", "VISA 해외여행보험", ["airport"], 10000,
               "해외 결제 시 여행자보험 자동 가입."),
        ],
        "Gold": [],
        "Standard": [],
    },
    "Mastercard": {
        "World Elite": [
            _t("🛋️", "MC 월드엘리트 라운지", ["airport", "lounge"], 50000,
               "LoungeKey 전 세계 1,000개+ 공항 라운지 무료 이용."),
            _t("📞", "MC 컨시어지 24시간", ["hotel", "travel"], 30000,
               "24시간 프리미엄 컨시어지 서비스."),
            _t("🏨", "호텔 프로그램", ["hotel"], 35000,
               "Mastercard 호텔 프로그램 특별 혜택."),
        ],
        "World": [
            _t("🛋️", "MC 월드 라운지", ["airport", "lounge"], 25000,
               "LoungeKey 공항 라운지 할인 이용 가능."),
            _t("🚗", "호텔 발렛", ["hotel", "valet"], 20000,
               "제휴 호텔 발렛파킹 할인."),
        ],
        "Platinum": [
            _t("🛡️", "MC 해외여행보험", ["airport"], 10000,
               "해외 결제 시 여행자보험 자동 가입."),
        ],
        "Gold": [],
        "Standard": [],
    },
    "AMEX": {
        "Centurion": [
            _t("🛋️", "AMEX 센추리온 라운지", ["airport", "lounge"], 80000,
               "전 세계 AMEX 센추리온 라운지 무료 이용."),
            _t("📞", "AMEX 컨시어지", ["hotel", "travel"], 50000,
               "24시간 프리미엄 컨시어지 서비스."),
            _t("🏨", "Fine Hotels & Resorts", ["hotel"], 60000,
               "AMEX FHR 프로그램 특별 혜택 (조식, 업그레이드, 레이트체크아웃)."),
        ],
        "Platinum": [
            _t("🛋️", "AMEX 라운지", ["airport", "lounge"], 40000,
               "인천공항 AMEX 라운지 및 PP 라운지 이용 가능."),
            _t("🏨", "AMEX 호텔 특전", ["hotel"], 30000,
               "Fine Hotels & Resorts 프로그램 혜택."),
        ],
        "Gold": [
            _t("🛍️", "AMEX 오퍼", ["shopping", "online"], 15000,
               "AMEX 제휴 가맹점 및 온라인몰 할인 혜택."),
        ],
        "Standard": [],
    },
    "JCB": {
        "Platinum": [
            _t("🛋️", "JCB 라운지", ["airport", "lounge"], 20000,
               "JCB 제휴 아시아 공항 라운지 이용."),
        ],
        "Gold": [],
        "Standard": [],
    },
    "UnionPay": {
        "Platinum": [
            _t("🛋️", "유니온페이 라운지", ["airport", "lounge"], 15000,
               "중국 주요 공항 라운지 이용 가능."),
            _t("🛍️", "중국 결제 할인", ["shopping"], 10000,
               "중국 현지 가맹점 결제 시 추가 할인 혜택."),
        ],
        "Standard": [],
    },
}


def resolve_network_benefits(
    user_cards: Iterable[Card],
    place_tags: Iterable[str],
    templates: NetworkTable = NETWORK_BENEFITS,
    default_value: int = DEFAULT_VALUATION_CONFIG.default_network_value,
) -> list[NetworkBenefit]:
    """
    Network-tier benefits that apply at a place tagged ``place_tags``.

    Each (network, grade, title) is reported once, attributed to the first
    of the user's cards carrying that network and grade.
    """
    tag_set = set(place_tags)
    resolved: dict[tuple[str, str, str], NetworkBenefit] = {}

    for card in user_cards:
        if not card.network or not card.grade:
            continue
        tier = templates.get(card.network, {}).get(card.grade)
        if not tier:
            continue
        for template in tier:
            if tag_set.isdisjoint(template.tags):
                continue
            key = (card.network, card.grade, template.title)
            if key in resolved:
                continue
            resolved[key] = NetworkBenefit(
                **template.model_dump(),
                card=card,
                network=card.network,
                grade=card.grade,
                estimated_value=template.value if template.value is not None else default_value,
            )

    return list(resolved.values())
