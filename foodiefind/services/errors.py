class ServiceError(Exception):
    pass


class InvalidURLError(ServiceError):
    pass


class PrivateOrUnavailableError(ServiceError):
    pass


class FetchFailedError(ServiceError):
    pass


class RateLimitedError(ServiceError):
    pass


class NoCaptionsError(ServiceError):
    def __init__(self, video_id: str, reason: str = "No captions available"):
        super().__init__(f"{reason}: {video_id}")
        self.video_id = video_id
        self.reason = reason


class TranscriptProviderError(ServiceError):
    def __init__(self, message: str, status_code: int | None = None):
        prefix = f"HTTP {status_code} - " if status_code is not None else ""
        super().__init__(f"{prefix}{message}")
        self.status_code = status_code
        self.message = message


class LLMConfigurationError(ServiceError):
    pass


class LLMProviderError(ServiceError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MapsProviderError(ServiceError):
    pass


class NetworkTimeoutError(ServiceError):
    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(f"Network timeout after {timeout_seconds}s: {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds
