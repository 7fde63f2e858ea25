from __future__ import annotations

import pytest

from foodiefind.services.ids import extract_channel_id, extract_video_id


class TestExtractVideoId:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://youtube.com/watch?feature=share&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://youtu.be/dQw4w9WgXcQ?t=30", "dQw4w9WgXcQ"),
            ("https://www.youtube.com/shorts/abc_DEF-123", "abc_DEF-123"),
            ("https://www.youtube.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ],
    )
    def test_supported_urls(self, url: str, expected: str) -> None:
        assert extract_video_id(url) == expected

    def test_unsupported_url(self) -> None:
        assert extract_video_id("https://vimeo.com/12345678") is None
        assert extract_video_id("") is None


class TestExtractChannelId:
    def test_channel_url(self) -> None:
        assert extract_channel_id("https://www.youtube.com/channel/UCabc123") == "UCabc123"

    def test_handle_keeps_prefix(self) -> None:
        assert extract_channel_id("https://www.youtube.com/@markwiens/videos") == "@markwiens"

    def test_legacy_urls(self) -> None:
        assert extract_channel_id("https://www.youtube.com/c/BestEverFoodReviewShow") == "BestEverFoodReviewShow"
        assert extract_channel_id("https://www.youtube.com/user/foodinsider") == "foodinsider"

    def test_unsupported_url(self) -> None:
        assert extract_channel_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ") is None
