from __future__ import annotations

from foodiefind.app.domain.errors import (
    CandidatePersistError,
    DuplicateRecommendationError,
    EmptyContentError,
    ExtractionError,
    ExtractionParseError,
    ExtractionProviderError,
    InfluencerAlreadyExistsError,
    InfluencerNotFoundError,
    ProcessingError,
    RepositoryError,
    RestaurantNotFoundError,
    TranscriptUnavailableError,
    UserLinkExistsError,
    VideoAlreadyExistsError,
    VideoAlreadyProcessedError,
    VideoNotFoundError,
    WorkerConfigurationError,
)


class TestProcessingError:
    def test_base_exception(self) -> None:
        error = ProcessingError("Base error")
        assert str(error) == "Base error"
        assert isinstance(error, Exception)


class TestTranscriptUnavailableError:
    def test_includes_both_reasons(self) -> None:
        error = TranscriptUnavailableError("vid123", "TranscriptsDisabled", "HTTP 404 - Not Found")

        assert "captions (TranscriptsDisabled)" in str(error)
        assert "fallback (HTTP 404 - Not Found)" in str(error)
        assert error.video_id == "vid123"
        assert isinstance(error, ProcessingError)


class TestEmptyContentError:
    def test_includes_video_id(self) -> None:
        error = EmptyContentError("vid123")
        assert "vid123" in str(error)
        assert error.video_id == "vid123"


class TestExtractionErrors:
    def test_parse_error_keeps_raw_text(self) -> None:
        error = ExtractionParseError(raw_text="not json")

        assert str(error) == "Failed to extract recommendations: AI response is not valid JSON"
        assert error.raw_text == "not json"
        assert isinstance(error, ExtractionError)

    def test_provider_error_default_retryable(self) -> None:
        error = ExtractionProviderError("rate limited")

        assert error.retryable is True
        assert error.reason == "rate limited"

    def test_provider_error_not_retryable(self) -> None:
        error = ExtractionProviderError("Missing Gemini API key.", retryable=False)
        assert error.retryable is False


class TestCandidatePersistError:
    def test_includes_candidate_and_reason(self) -> None:
        error = CandidatePersistError("Franklin Barbecue", "insert failed")

        assert "Franklin Barbecue" in str(error)
        assert error.reason == "insert failed"


class TestDuplicateRecommendationError:
    def test_includes_ids(self) -> None:
        error = DuplicateRecommendationError("pk-1", "rest-1")

        assert "video=pk-1" in str(error)
        assert "restaurant=rest-1" in str(error)


class TestNotFoundErrors:
    def test_video(self) -> None:
        assert str(VideoNotFoundError("vid123")) == "Video not found: vid123"

    def test_restaurant(self) -> None:
        assert RestaurantNotFoundError("r1").restaurant_id == "r1"

    def test_influencer(self) -> None:
        assert InfluencerNotFoundError("inf-1").influencer_id == "inf-1"


class TestConflictErrors:
    def test_already_processed(self) -> None:
        assert str(VideoAlreadyProcessedError("vid123")) == "Video already processed: vid123"

    def test_already_exists(self) -> None:
        assert VideoAlreadyExistsError("vid123").video_id == "vid123"
        assert InfluencerAlreadyExistsError("UCtaco").channel_id == "UCtaco"

    def test_user_link(self) -> None:
        error = UserLinkExistsError("favorites", "r1")

        assert str(error) == "Already in favorites: r1"
        assert error.relation == "favorites"


class TestRepositoryError:
    def test_includes_operation_and_reason(self) -> None:
        error = RepositoryError("create_edge", "connection reset")

        assert "create_edge" in str(error)
        assert error.operation == "create_edge"
        assert error.reason == "connection reset"


class TestWorkerConfigurationError:
    def test_joins_errors(self) -> None:
        error = WorkerConfigurationError(["SUPABASE_URL is required", "GEMINI_API_KEY is required"])

        assert "SUPABASE_URL is required, GEMINI_API_KEY is required" in str(error)
        assert len(error.errors) == 2
