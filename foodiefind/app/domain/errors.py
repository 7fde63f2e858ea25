from __future__ import annotations


class ProcessingError(Exception):
    pass


class TranscriptUnavailableError(ProcessingError):
    def __init__(self, video_id: str, primary_reason: str, fallback_reason: str):
        super().__init__(
            "Failed to fetch video transcript from both sources: "
            f"captions ({primary_reason}) and fallback ({fallback_reason})"
        )
        self.video_id = video_id
        self.primary_reason = primary_reason
        self.fallback_reason = fallback_reason


class EmptyContentError(ProcessingError):
    def __init__(self, video_id: str):
        super().__init__(f"No transcript or description available for processing: {video_id}")
        self.video_id = video_id


class ExtractionError(ProcessingError):
    pass


class ExtractionParseError(ExtractionError):
    def __init__(self, message: str = "AI response is not valid JSON", raw_text: str | None = None):
        super().__init__(f"Failed to extract recommendations: {message}")
        self.raw_text = raw_text


class ExtractionProviderError(ExtractionError):
    def __init__(self, reason: str, retryable: bool = True):
        super().__init__(f"Failed to extract recommendations: {reason}")
        self.reason = reason
        self.retryable = retryable


class CandidatePersistError(ProcessingError):
    def __init__(self, candidate_name: str, reason: str):
        super().__init__(f"Failed to persist recommendation for {candidate_name}: {reason}")
        self.candidate_name = candidate_name
        self.reason = reason


class DuplicateRecommendationError(ProcessingError):
    def __init__(self, video_id: str, restaurant_id: str):
        super().__init__(f"Recommendation already exists: video={video_id}, restaurant={restaurant_id}")
        self.video_id = video_id
        self.restaurant_id = restaurant_id


class VideoNotFoundError(ProcessingError):
    def __init__(self, video_id: str):
        super().__init__(f"Video not found: {video_id}")
        self.video_id = video_id


class RestaurantNotFoundError(ProcessingError):
    def __init__(self, restaurant_id: str):
        super().__init__(f"Restaurant not found: {restaurant_id}")
        self.restaurant_id = restaurant_id


class InfluencerNotFoundError(ProcessingError):
    def __init__(self, influencer_id: str):
        super().__init__(f"Influencer not found: {influencer_id}")
        self.influencer_id = influencer_id


class VideoAlreadyProcessedError(ProcessingError):
    def __init__(self, video_id: str):
        super().__init__(f"Video already processed: {video_id}")
        self.video_id = video_id


class RepositoryError(ProcessingError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class WorkerConfigurationError(ProcessingError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Worker configuration errors: {', '.join(errors)}")
        self.errors = errors


class VideoAlreadyExistsError(ProcessingError):
    def __init__(self, video_id: str):
        super().__init__(f"Video already exists: {video_id}")
        self.video_id = video_id


class InfluencerAlreadyExistsError(ProcessingError):
    def __init__(self, channel_id: str):
        super().__init__(f"Influencer already exists: {channel_id}")
        self.channel_id = channel_id


class UserLinkExistsError(ProcessingError):
    def __init__(self, relation: str, target_id: str):
        super().__init__(f"Already in {relation}: {target_id}")
        self.relation = relation
        self.target_id = target_id
