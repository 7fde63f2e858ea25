from __future__ import annotations

from unittest.mock import MagicMock

from foodiefind.services.listings import (
    build_search_filter,
    group_recommendations_by_restaurant,
    influencer_stats,
    search_restaurants,
    summarize_video_stats,
    video_recommendations,
)


class TestBuildSearchFilter:
    def test_single_term(self) -> None:
        assert build_search_filter("Tacos") == "name.ilike.%tacos%,cuisine_type.ilike.%tacos%,city.ilike.%tacos%"

    def test_single_short_term_is_kept(self) -> None:
        assert build_search_filter("a") == "name.ilike.%a%,cuisine_type.ilike.%a%,city.ilike.%a%"

    def test_multi_word_drops_short_terms(self) -> None:
        result = build_search_filter("a taco b austin")

        assert result is not None
        conditions = result.split(",")
        assert len(conditions) == 6
        assert "name.ilike.%taco%" in conditions
        assert "city.ilike.%austin%" in conditions
        assert "name.ilike.%a%" not in conditions

    def test_blank_query(self) -> None:
        assert build_search_filter("   ") is None
        assert build_search_filter(None) is None
        assert build_search_filter("a b") is None


class TestGroupRecommendationsByRestaurant:
    def test_groups_and_averages(self) -> None:
        video_one = {"video_id": "v1", "title": "Taco crawl"}
        video_two = {"video_id": "v2", "title": "Taco crawl 2"}
        rows = [
            {"restaurants": {"id": "r1", "name": "Veracruz"}, "videos": video_one, "confidence_score": 0.9},
            {"restaurants": {"id": "r2", "name": "Suerte"}, "videos": video_one, "confidence_score": 0.7},
            {"restaurants": {"id": "r1", "name": "Veracruz"}, "videos": video_two, "confidence_score": 0.6},
            {"restaurants": None, "videos": video_two, "confidence_score": 0.8},
        ]

        grouped = group_recommendations_by_restaurant(rows)

        assert [entry["id"] for entry in grouped] == ["r1", "r2"]
        veracruz = grouped[0]
        assert veracruz["mention_count"] == 2
        assert veracruz["average_confidence"] == 0.75
        assert veracruz["videos"] == [video_one, video_two]
        assert "_total" not in veracruz

    def test_same_video_listed_once(self) -> None:
        video = {"video_id": "v1"}
        rows = [
            {"restaurant": {"id": "r1"}, "video": video, "confidence_score": 0.8, "dish_mentioned": "al pastor"},
            {"restaurant": {"id": "r1"}, "video": video, "confidence_score": 0.8, "dish_mentioned": "suadero"},
        ]

        (entry,) = group_recommendations_by_restaurant(rows)

        assert entry["videos"] == [video]
        assert [r["dish_mentioned"] for r in entry["recommendations"]] == ["al pastor", "suadero"]


class TestSummarizeVideoStats:
    def test_buckets(self) -> None:
        rows = [
            {"duration_seconds": 30, "processed": False, "processing_error": None},
            {"duration_seconds": 90, "processed": False, "processing_error": None},
            {"duration_seconds": 300, "processed": True, "processing_error": None},
            {"duration_seconds": 900, "processed": False, "processing_error": "boom"},
            {"duration_seconds": 1200, "processed": True, "processing_error": None},
        ]

        stats = summarize_video_stats(rows)

        assert stats["total"] == 5
        assert stats["shorts"] == 1
        assert stats["short_medium"] == 1
        assert stats["suitable"] == 3
        assert stats["long"] == 2
        assert stats["processed"] == 2
        assert stats["failed"] == 1
        assert stats["suitable_processed"] == 2
        assert stats["suitable_processing_rate"] == 67
        assert stats["distribution"] == {"shorts": 1, "short": 1, "medium": 1, "long": 2}

    def test_empty(self) -> None:
        stats = summarize_video_stats([])

        assert stats["total"] == 0
        assert stats["suitable_processing_rate"] == 0


class TestSupabaseQueries:
    def test_search_applies_filters(self) -> None:
        supa = MagicMock()
        request = supa.table.return_value.select.return_value
        request.or_.return_value = request
        request.eq.return_value = request
        request.ilike.return_value = request
        request.order.return_value = request
        request.limit.return_value = request
        request.execute.return_value = MagicMock(data=[{"id": "r1"}])

        results = search_restaurants(supa, "tacos", cuisine="Mexican", city="Austin", price="$", limit=10)

        assert results == [{"id": "r1"}]
        supa.table.assert_called_with("restaurants")
        request.or_.assert_called_once_with(build_search_filter("tacos"))
        request.eq.assert_any_call("cuisine_type", "Mexican")
        request.eq.assert_any_call("price_range", "$")
        request.ilike.assert_called_once_with("city", "%Austin%")
        request.limit.assert_called_once_with(10)

    def test_video_recommendations_unknown_video(self) -> None:
        supa = MagicMock()
        chain = supa.table.return_value.select.return_value.eq.return_value.limit.return_value
        chain.execute.return_value = MagicMock(data=[])

        assert video_recommendations(supa, "missing") is None

    def test_influencer_stats_unwraps_single_row(self) -> None:
        supa = MagicMock()
        supa.rpc.return_value.execute.return_value = MagicMock(data=[{"total_videos": 4}])

        assert influencer_stats(supa, "inf-1") == {"total_videos": 4}
        supa.rpc.assert_called_once_with("get_influencer_stats", {"influencer_uuid": "inf-1"})
