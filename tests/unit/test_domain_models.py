from __future__ import annotations

from foodiefind.app.domain.models import (
    BatchFailure,
    BatchReport,
    PersistedRecommendation,
    ProcessingOutcome,
    RecommendationCandidate,
    RecommendationEdge,
    Restaurant,
    TranscriptSource,
    Video,
    VideoState,
)


class TestVideoState:
    def test_state_values(self) -> None:
        assert VideoState.PENDING.value == "PENDING"
        assert VideoState.PROCESSED.value == "PROCESSED"
        assert VideoState.FAILED.value == "FAILED"

    def test_state_is_string_enum(self) -> None:
        assert isinstance(VideoState.PENDING, str)
        assert VideoState.FAILED == "FAILED"


class TestVideo:
    def test_new_video_is_pending(self) -> None:
        video = Video(id="pk-1", video_id="vid123", title="Taco crawl")

        assert video.state == VideoState.PENDING
        assert video.duration_seconds == 0
        assert video.transcript is None

    def test_error_means_failed(self) -> None:
        video = Video(id="pk-1", video_id="vid123", title="Taco crawl", processing_error="boom")
        assert video.state == VideoState.FAILED

    def test_processed_wins_over_error(self) -> None:
        video = Video(id="pk-1", video_id="vid123", title="Taco crawl", processed=True, processing_error="stale")
        assert video.state == VideoState.PROCESSED


class TestRecommendationCandidate:
    def test_defaults(self) -> None:
        candidate = RecommendationCandidate(name="Franklin Barbecue")

        assert candidate.confidence_score == 0.8
        assert candidate.mentioned_at is None
        assert candidate.price_range is None


class TestProcessingOutcome:
    def test_processed_count(self) -> None:
        restaurant = Restaurant(id="r1", name="Franklin Barbecue")
        edge = RecommendationEdge(id="e1", video_id="pk-1", restaurant_id="r1", confidence_score=0.9)
        outcome = ProcessingOutcome(
            video_id="vid123",
            transcript_source=TranscriptSource.CAPTIONS,
            extracted_count=2,
            recommendations=[PersistedRecommendation(restaurant=restaurant, recommendation=edge)],
            duplicate_count=1,
        )

        assert outcome.processed_count == 1


class TestBatchReport:
    def test_to_dict(self) -> None:
        report = BatchReport(
            total=2,
            processed=1,
            failed=1,
            outcomes=[ProcessingOutcome(video_id="v1", transcript_source=TranscriptSource.STORED)],
            errors=[BatchFailure(video_id="v2", title="Taco crawl", error="boom")],
        )

        assert report.to_dict() == {
            "total": 2,
            "processed": 1,
            "failed": 1,
            "videos_processed": [{"videoId": "v1", "recommendations": 0}],
            "errors": [{"videoId": "v2", "title": "Taco crawl", "error": "boom"}],
        }
