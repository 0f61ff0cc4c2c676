from __future__ import annotations

import copy

import pytest
from pydantic import ValidationError

from cardai.engine.index import BenefitIndex, build_index
from cardai.engine.models import BenefitScope


def _ids(benefits):
    return [b.id for b in benefits]


# ── Build ────────────────────────────────────────────────────────────────


class TestBuild:
    def test_estimated_values_assigned(self, index):
        assert index.get("a-lounge").estimated_value == 55000
        assert index.get("a-starbucks").estimated_value == 15000
        assert index.get("b-valet").estimated_value == 20000

    def test_card_resolved(self, index, cards):
        assert index.get("a-cafe").card == cards["A"]

    def test_unknown_card_is_carried_not_rejected(self, index):
        ghost = index.get("ghost")
        assert ghost is not None
        assert ghost.card is None
        assert "ghost" in index
        assert len(index) == 8

    def test_by_card_id_sorted_descending(self, index):
        assert _ids(index.by_card_id["A"]) == ["a-lounge", "a-starbucks", "a-cafe", "a-points"]

    def test_tag_bucket_sort_is_stable(self, index):
        # a-cafe and c-cafe tie at 7000 and keep load order
        assert _ids(index.by_place_tag["cafe"]) == ["a-starbucks", "ghost", "a-cafe", "c-cafe"]

    def test_universal_bucket(self, index):
        assert _ids(index.universal) == ["b-universal", "a-points"]

    def test_partition_invariant(self, index, benefits):
        for benefit_id, raw in benefits.items():
            tags = raw.get("placeTags") or []
            in_universal = benefit_id in _ids(index.universal)
            tag_memberships = sum(
                1 for bucket in index.by_place_tag.values() if benefit_id in _ids(bucket)
            )
            if tags:
                assert not in_universal
                assert tag_memberships == len(tags)
                assert index.get(benefit_id).scope is BenefitScope.tagged
            else:
                assert in_universal
                assert tag_memberships == 0
                assert index.get(benefit_id).scope is BenefitScope.universal

    def test_same_object_in_every_tag_bucket(self, index):
        in_cafe = next(b for b in index.by_place_tag["cafe"] if b.id == "a-starbucks")
        in_starbucks = next(b for b in index.by_place_tag["starbucks"] if b.id == "a-starbucks")
        assert in_cafe is in_starbucks

    def test_raw_input_not_mutated(self, benefits, cards):
        before = copy.deepcopy(benefits)
        BenefitIndex(benefits, cards)
        assert benefits == before

    def test_entries_are_read_only(self, index):
        with pytest.raises(ValidationError):
            index.get("a-cafe").estimated_value = 0
        with pytest.raises(TypeError):
            index.by_card_id["A"] = ()

    def test_accepts_raw_card_dicts(self, benefits):
        idx = build_index(benefits, {"A": {"issuer": "현대카드", "name": "Card A"}})
        assert idx.get("a-cafe").card.id == "A"
        assert idx.card("A").issuer == "현대카드"

    def test_idempotent_build(self, benefits, cards):
        first = BenefitIndex(benefits, cards)
        second = BenefitIndex(benefits, cards)
        card_ids = ["A", "B", "C"]
        assert first.get_by_place(card_ids, ["cafe", "airport"]) == second.get_by_place(
            card_ids, ["cafe", "airport"]
        )
        assert first.get_universal(card_ids) == second.get_universal(card_ids)
        assert first.get_grouped_by_category(card_ids) == second.get_grouped_by_category(card_ids)
        assert first.get_by_card_ids(card_ids) == second.get_by_card_ids(card_ids)

    def test_rebuild_from_enriched_benefits(self, index, cards):
        enriched = index.get_by_card_ids(["A", "B"])
        rebuilt = BenefitIndex({b.id: b for b in enriched}, cards)
        assert len(rebuilt) == len(enriched)
        assert rebuilt.get_by_card_ids(["A", "B"]) == enriched
        assert rebuilt.get_by_place(["A", "B"], ["cafe", "airport"]) == index.get_by_place(
            ["A", "B"], ["cafe", "airport"]
        )
        assert rebuilt.get_universal(["A", "B"]) == index.get_universal(["A", "B"])

    def test_empty_inputs(self):
        idx = BenefitIndex({}, {})
        assert len(idx) == 0
        assert idx.get_by_place(["A"], ["cafe"]) == []
        assert idx.get_universal(["A"]) == []
        assert idx.get_grouped_by_category(["A"]) == {}
        assert idx.search(["A"], "cafe", ["cafe"]) == []


# ── Queries ──────────────────────────────────────────────────────────────


class TestQueries:
    def test_get_by_card_ids_grouped_in_request_order(self, index):
        result = index.get_by_card_ids(["B", "missing", "A"])
        assert _ids(result) == [
            "b-valet", "b-universal",
            "a-lounge", "a-starbucks", "a-cafe", "a-points",
        ]

    def test_get_by_place_dedupes_multi_tag_match(self, index):
        result = index.get_by_place(["A"], ["cafe", "starbucks"])
        assert _ids(result) == ["a-starbucks", "a-cafe"]

    def test_get_by_place_filters_cards_and_sorts(self, index):
        result = index.get_by_place(["A", "C"], ["cafe", "airport"])
        assert _ids(result) == ["a-lounge", "a-starbucks", "a-cafe", "c-cafe"]
        values = [b.estimated_value for b in result]
        assert values == sorted(values, reverse=True)

    def test_get_by_place_never_returns_universal(self, index):
        all_tags = list(index.by_place_tag)
        result = index.get_by_place(["A", "B"], all_tags)
        assert "b-universal" not in _ids(result)
        assert "a-points" not in _ids(result)

    def test_get_by_place_unknown_tag_is_empty(self, index):
        assert index.get_by_place(["A"], ["nowhere"]) == []

    def test_get_universal(self, index):
        assert _ids(index.get_universal(["B"])) == ["b-universal"]
        assert _ids(index.get_universal(["A", "B"])) == ["b-universal", "a-points"]
        assert index.get_universal([]) == []

    def test_grouped_by_category_excludes_universal(self, index):
        grouped = index.get_grouped_by_category(["A", "B"])
        assert set(grouped) == {"cafe", "lounge", "valet"}
        assert _ids(grouped["cafe"]) == ["a-starbucks", "a-cafe"]
        assert "points" not in grouped
        assert "shopping" not in grouped


# ── Search ───────────────────────────────────────────────────────────────


class TestSearch:
    def test_category_match_first(self, index):
        result = index.search(["A"], "cafe", ["스벅", "starbucks"], 5)
        assert _ids(result) == ["a-starbucks", "a-cafe"]

    def test_place_tag_match(self, index):
        result = index.search(["A", "B"], "airport", [], 8)
        assert _ids(result) == ["a-lounge"]

    def test_title_match(self, index):
        result = index.search(["A", "B"], "golf", ["발렛"], 8)
        assert _ids(result) == ["b-valet"]

    def test_title_match_is_case_insensitive(self, index):
        assert _ids(index.search(["A"], "nothing", ["pp"], 8)) == ["a-lounge"]
        assert _ids(index.search(["A"], "nothing", ["Pp"], 8)) == ["a-lounge"]

    def test_title_stage_skipped_when_limit_reached(self, index):
        assert _ids(index.search(["A"], "cafe", ["라운지"], 2)) == ["a-starbucks", "a-cafe"]

    def test_title_stage_fills_remaining_slots(self, index):
        result = index.search(["A"], "cafe", ["라운지"], 3)
        assert _ids(result) == ["a-lounge", "a-starbucks", "a-cafe"]

    def test_truncates_to_limit(self, index):
        result = index.search(["A", "C"], "cafe", [], 2)
        assert _ids(result) == ["a-starbucks", "a-cafe"]

    def test_only_requested_cards(self, index):
        assert index.search(["B"], "cafe", ["커피"], 8) == []

    def test_title_match_includes_universal_benefits(self, index):
        assert _ids(index.search(["B"], "cafe", ["할인"], 8)) == ["b-universal"]
