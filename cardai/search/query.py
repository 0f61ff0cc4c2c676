from __future__ import annotations

# Canonical term -> aliases. A query that names either side pulls in the whole group.
SEARCH_SYNONYMS: dict[str, list[str]] = {
    "세븐": ["세븐일레븐", "7eleven", "seven"],
    "씨유": ["cu", "CU"],
    "gs": ["gs25", "GS25", "gs편의점"],
    "이마트": ["emart", "e마트", "이마트24"],
    "gs칼텍스": ["gscaltex", "칼텍스", "caltex"],
    "sk": ["sk에너지", "sk주유소", "sk오일"],
    "에쓰오일": ["s-oil", "soil", "S-OIL"],
    "현대오일뱅크": ["현대오일", "oilbank"],
    "스벅": ["스타벅스", "starbucks"],
    "투썸": ["투썸플레이스", "twosome"],
    "이디야": ["ediya"],
    "메가커피": ["메가", "mega"],
    "인천공항": ["icn", "incheon", "인천", "t1", "t2"],
    "김포공항": ["gimpo", "김포"],
    "신세계": ["shinsegae", "센텀", "신세계백화점"],
    "현백": ["현대백화점", "현대"],
    "롯백": ["롯데백화점", "롯데"],
    "메리어트": ["marriott", "jw", "jw메리어트"],
    "힐튼": ["hilton", "콘래드", "conrad"],
    "발렛": ["valet", "발렛파킹"],
    "라운지": ["lounge", "공항라운지"],
}

KEYWORD_TO_TAG: dict[str, str] = {
    "발렛": "valet",
    "주차": "valet",
    "라운지": "lounge",
    "pp": "lounge",
    "호텔": "hotel",
    "다이닝": "fnb",
    "골프": "golf",
    "카페": "cafe",
    "커피": "cafe",
    "쇼핑": "shopping",
    "백화점": "shopping",
    "영화": "entertainment",
    "공항": "airport",
    "포인트": "points",
}


def find_tag(query: str, keywords: dict[str, str] = KEYWORD_TO_TAG) -> str:
    """Return the tag a search keyword stands for, or the normalised query itself."""
    q = query.lower().strip()
    if q in keywords:
        return keywords[q]
    if q:
        for keyword, tag in keywords.items():
            if keyword in q or q in keyword:
                return tag
    return q


def expand_search_query(
    query: str, synonyms: dict[str, list[str]] = SEARCH_SYNONYMS
) -> list[str]:
    """
    Expand a query into the list of terms to match against benefit titles.

    A synonym group is pulled in only when the query equals or contains its
    canonical term or one of its aliases. A query that is merely a substring
    of an alias does not expand (e.g. "s" must not drag in every group).
    """
    q = query.lower().strip()
    terms = [q]
    if not q:
        return terms

    for canonical, aliases in synonyms.items():
        canonical_lower = canonical.lower()
        aliases_lower = [a.lower() for a in aliases]
        if q == canonical_lower or canonical_lower in q or any(a in q for a in aliases_lower):
            terms.append(canonical_lower)
            terms.extend(aliases_lower)

    return list(dict.fromkeys(terms))
