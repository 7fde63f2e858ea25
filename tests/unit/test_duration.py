from __future__ import annotations

import pytest

from foodiefind.services.duration import format_duration, is_suitable, parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("PT1H2M10S", 3730),
            ("PT15M", 900),
            ("PT45S", 45),
            ("PT2H", 7200),
        ],
    )
    def test_iso_durations(self, value: str, expected: int) -> None:
        assert parse_duration(value) == expected

    def test_unknown_duration_is_zero(self) -> None:
        assert parse_duration(None) == 0
        assert parse_duration("") == 0
        assert parse_duration("P1D") == 0


class TestFormatDuration:
    def test_formats_components(self) -> None:
        assert format_duration(3730) == "PT1H2M10S"
        assert format_duration(900) == "PT15M"
        assert format_duration(59) == "PT59S"

    def test_missing_duration(self) -> None:
        assert format_duration(None) is None
        assert format_duration(0) is None

    def test_parse_accepts_formatted_value(self) -> None:
        assert parse_duration(format_duration(754)) == 754


class TestIsSuitable:
    def test_rejects_short_form(self) -> None:
        assert is_suitable(45, "Quick taco bite") is False
        assert is_suitable(60, "Quick taco bite") is False

    def test_rejects_up_to_two_minutes(self) -> None:
        assert is_suitable(90, "Taco review") is False
        assert is_suitable(120, "Taco review") is False

    def test_accepts_longer_videos(self) -> None:
        assert is_suitable(121, "Taco review") is True
        assert is_suitable(1800, "Eating at every BBQ joint in Austin") is True

    def test_unknown_duration_does_not_block(self) -> None:
        assert is_suitable(0, "Taco review") is True
        assert is_suitable(None, None) is True

    @pytest.mark.parametrize(
        "title",
        [
            "Official Music Video",
            "LIVE STREAM: Q&A",
            "Best food #shorts",
            "Food fails compilation",
            "Season 2 Trailer",
            "Big announcement!",
        ],
    )
    def test_rejects_non_food_titles(self, title: str) -> None:
        assert is_suitable(600, title) is False
