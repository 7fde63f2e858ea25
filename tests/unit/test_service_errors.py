from __future__ import annotations

from foodiefind.services.errors import (
    FetchFailedError,
    InvalidURLError,
    LLMConfigurationError,
    LLMProviderError,
    MapsProviderError,
    NetworkTimeoutError,
    NoCaptionsError,
    PrivateOrUnavailableError,
    RateLimitedError,
    ServiceError,
    TranscriptProviderError,
)


class TestServiceError:
    def test_base_exception(self) -> None:
        error = ServiceError("Base service error")
        assert str(error) == "Base service error"
        assert isinstance(error, Exception)


class TestSimpleServiceErrors:
    def test_subclasses(self) -> None:
        for error_type in (
            InvalidURLError,
            PrivateOrUnavailableError,
            FetchFailedError,
            RateLimitedError,
            LLMConfigurationError,
            MapsProviderError,
        ):
            error = error_type("message")
            assert str(error) == "message"
            assert isinstance(error, ServiceError)


class TestNoCaptionsError:
    def test_default_reason(self) -> None:
        error = NoCaptionsError("vid123")

        assert str(error) == "No captions available: vid123"
        assert error.video_id == "vid123"

    def test_custom_reason(self) -> None:
        error = NoCaptionsError("vid123", "TranscriptsDisabled")
        assert error.reason == "TranscriptsDisabled"


class TestTranscriptProviderError:
    def test_with_status(self) -> None:
        error = TranscriptProviderError("Not Found", status_code=404)

        assert str(error) == "HTTP 404 - Not Found"
        assert error.message == "Not Found"

    def test_without_status(self) -> None:
        error = TranscriptProviderError("RapidAPI transcript provider not configured")

        assert str(error) == "RapidAPI transcript provider not configured"
        assert error.status_code is None


class TestLLMProviderError:
    def test_keeps_status(self) -> None:
        error = LLMProviderError("Gemini server error", status_code=503)
        assert error.status_code == 503


class TestNetworkTimeoutError:
    def test_includes_timeout_info(self) -> None:
        error = NetworkTimeoutError("https://maps.googleapis.com", 15.0)

        assert "15.0s" in str(error)
        assert error.url == "https://maps.googleapis.com"
        assert error.timeout_seconds == 15.0
