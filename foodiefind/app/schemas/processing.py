# foodiefind/app/schemas/processing.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from foodiefind.app.domain.models import BatchReport, ProcessingOutcome


class BatchRequest(BaseModel):
    limit: int = Field(default=5, ge=1, le=50)


class ReprocessRequest(BaseModel):
    limit: int = Field(default=3, ge=1, le=50)


class AddAndProcessRequest(BaseModel):
    videoUrl: str = Field(..., min_length=1)


class LinkedRecommendation(BaseModel):
    restaurantId: str
    restaurantName: str
    restaurantCreated: bool = False
    recommendationId: str
    confidenceScore: float
    dishMentioned: Optional[str] = None
    mentionedAt: Optional[int] = None


class ProcessingResponse(BaseModel):
    message: str
    videoId: str
    transcriptSource: str
    extracted: int = 0
    recommendations: int = 0
    duplicates: int = 0
    failed: int = 0
    linked: list[LinkedRecommendation] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: ProcessingOutcome, message: str = "Video processed successfully") -> "ProcessingResponse":
        return cls(
            message=message,
            videoId=outcome.video_id,
            transcriptSource=outcome.transcript_source.value,
            extracted=outcome.extracted_count,
            recommendations=outcome.processed_count,
            duplicates=outcome.duplicate_count,
            failed=outcome.failed_count,
            linked=[
                LinkedRecommendation(
                    restaurantId=item.restaurant.id,
                    restaurantName=item.restaurant.name,
                    restaurantCreated=item.restaurant_created,
                    recommendationId=item.recommendation.id,
                    confidenceScore=item.recommendation.confidence_score,
                    dishMentioned=item.recommendation.dish_mentioned,
                    mentionedAt=item.recommendation.mentioned_at_timestamp,
                )
                for item in outcome.recommendations
            ],
        )


class BatchVideoResult(BaseModel):
    videoId: str
    recommendations: int


class BatchError(BaseModel):
    videoId: str
    title: Optional[str] = None
    error: str


class BatchResponse(BaseModel):
    message: str
    total: int = 0
    processed: int = 0
    failed: int = 0
    videos_processed: list[BatchVideoResult] = Field(default_factory=list)
    errors: list[BatchError] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: BatchReport, message: str) -> "BatchResponse":
        return cls(message=message, **report.to_dict())


class ProcessingStatusResponse(BaseModel):
    total: int = 0
    processed: int = 0
    failed: int = 0
    pending: int = 0
    processing_rate: float = 0.0
