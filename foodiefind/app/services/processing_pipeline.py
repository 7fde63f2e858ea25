# foodiefind/app/services/processing_pipeline.py
"""
Video-to-recommendation pipeline.
Collaborators and repositories are injected so the pipeline can run against stubs.
"""
from __future__ import annotations

import logging
from typing import Any

from foodiefind.app.domain.errors import (
    CandidatePersistError,
    DuplicateRecommendationError,
    EmptyContentError,
    TranscriptUnavailableError,
    VideoAlreadyProcessedError,
    VideoNotFoundError,
)
from foodiefind.app.domain.models import (
    BatchFailure,
    BatchReport,
    EdgeConflictPolicy,
    PersistedRecommendation,
    ProcessingOutcome,
    RecommendationCandidate,
    TranscriptResult,
    TranscriptSource,
    Video,
)
from foodiefind.app.infra.db.base import RecommendationRepository, VideoRepository
from foodiefind.services.duration import MIN_SUITABLE_DURATION_SECONDS, is_suitable
from foodiefind.services.extractor import RecommendationExtractor
from foodiefind.services.resolver import RestaurantResolver
from foodiefind.services.timestamps import TimestampReconciler
from foodiefind.services.transcripts import TranscriptAcquirer

logger = logging.getLogger(__name__)

DEFAULT_BATCH_LIMIT = 5
DEFAULT_REPROCESS_LIMIT = 3


def _short_title(title: str | None) -> str:
    return (title or "")[:50]


class ProcessingOrchestrator:
    """
    Runs one video, or a batch of pending videos, through the pipeline.

    The steps are: acquire transcript, extract candidates, reconcile timestamps,
    resolve restaurants and link them, then mark the video processed.
    A failure before any candidate is persisted marks the video as failed.
    """

    def __init__(
        self,
        videos: VideoRepository,
        recommendations: RecommendationRepository,
        acquirer: TranscriptAcquirer,
        extractor: RecommendationExtractor,
        reconciler: TimestampReconciler,
        resolver: RestaurantResolver,
        edge_policy: EdgeConflictPolicy = EdgeConflictPolicy.SKIP_EXISTING,
    ) -> None:
        if edge_policy is not EdgeConflictPolicy.SKIP_EXISTING:
            raise ValueError(f"Unsupported edge conflict policy: {edge_policy}")
        self.videos = videos
        self.recommendations = recommendations
        self.acquirer = acquirer
        self.extractor = extractor
        self.reconciler = reconciler
        self.resolver = resolver
        self.edge_policy = edge_policy

    def process_video_id(self, video_id: str) -> ProcessingOutcome:
        video = self.videos.get_video(video_id)
        if video is None:
            raise VideoNotFoundError(video_id)
        return self.process_video(video)

    def process_video(self, video: Video) -> ProcessingOutcome:
        """
        Process a single stored video.

        Raises:
            VideoAlreadyProcessedError: If the video is already processed
            ProcessingError: If the transcript or extraction step fails; the video
                is marked failed with the error text before re-raising
        """
        if video.processed:
            raise VideoAlreadyProcessedError(video.video_id)

        logger.info("Processing video: video_id=%s, title=%s", video.video_id, _short_title(video.title))

        try:
            transcript = self._get_transcript(video)
            candidates = self.extractor.extract(transcript.text, video.title)
        except Exception as error:
            logger.error("Video processing failed: video_id=%s, error=%s", video.video_id, error)
            self.videos.mark_failed(video.video_id, str(error))
            raise

        candidates = self.reconciler.reconcile(transcript.timestamped, candidates)

        outcome = ProcessingOutcome(
            video_id=video.video_id,
            transcript_source=transcript.source,
            extracted_count=len(candidates),
        )
        for candidate in candidates:
            self._persist_candidate(video, candidate, outcome)

        self.videos.mark_processed(video.video_id)
        logger.info(
            "Video processed: video_id=%s, source=%s, extracted=%d, linked=%d, duplicates=%d, failed=%d",
            video.video_id,
            outcome.transcript_source.value,
            outcome.extracted_count,
            outcome.processed_count,
            outcome.duplicate_count,
            outcome.failed_count,
        )
        return outcome

    def _get_transcript(self, video: Video) -> TranscriptResult:
        if video.transcript and video.transcript.strip():
            logger.info("Using stored transcript for %s", video.video_id)
            return TranscriptResult(
                text=video.transcript,
                source=TranscriptSource.STORED,
                timestamped=self.acquirer.fetch_timestamped(video.video_id),
            )

        try:
            result = self.acquirer.acquire(video.video_id)
        except TranscriptUnavailableError as error:
            logger.warning("Transcript unavailable for %s, using description: %s", video.video_id, error)
            description = (video.description or "").strip()
            if not description:
                raise EmptyContentError(video.video_id) from error
            return TranscriptResult(text=description, source=TranscriptSource.DESCRIPTION)

        self.videos.update_transcript(video.video_id, result.text)
        return result

    def _persist_candidate(
        self,
        video: Video,
        candidate: RecommendationCandidate,
        outcome: ProcessingOutcome,
    ) -> None:
        try:
            restaurant, created = self.resolver.resolve_with_status(candidate)

            if self.recommendations.find_edge(video.id, restaurant.id) is not None:
                raise DuplicateRecommendationError(video.id, restaurant.id)

            edge = self.recommendations.create_edge(video.id, restaurant.id, candidate)
        except DuplicateRecommendationError as error:
            outcome.duplicate_count += 1
            logger.info("Skipping existing recommendation: %s", error)
            return
        except Exception as error:
            outcome.failed_count += 1
            failure = CandidatePersistError(candidate.name, str(error))
            logger.warning("Candidate skipped: video_id=%s, %s", video.video_id, failure)
            return

        outcome.recommendations.append(
            PersistedRecommendation(restaurant=restaurant, recommendation=edge, restaurant_created=created)
        )

    def _run_videos(self, videos: list[Video]) -> BatchReport:
        report = BatchReport(total=len(videos))

        for video in videos:
            try:
                outcome = self.process_video(video)
            except Exception as error:
                report.failed += 1
                report.errors.append(BatchFailure(video.video_id, _short_title(video.title), str(error)))
                continue
            report.processed += 1
            report.outcomes.append(outcome)

        logger.info(
            "Batch completed: total=%d, processed=%d, failed=%d",
            report.total,
            report.processed,
            report.failed,
        )
        return report

    def run_batch(self, limit: int = DEFAULT_BATCH_LIMIT) -> BatchReport:
        """Process up to `limit` pending videos, newest first, one at a time."""
        pending = self.videos.find_unprocessed(limit, MIN_SUITABLE_DURATION_SECONDS)
        eligible = [video for video in pending if is_suitable(video.duration_seconds, None)]
        logger.info("Starting batch: limit=%d, found=%d, eligible=%d", limit, len(pending), len(eligible))
        return self._run_videos(eligible)

    def reprocess_failed(self, limit: int = DEFAULT_REPROCESS_LIMIT) -> BatchReport:
        failed = self.videos.find_failed(limit)
        logger.info("Reprocessing failed videos: limit=%d, found=%d", limit, len(failed))

        for video in failed:
            self.videos.reset_processing(video.video_id)
            video.processed = False
            video.processing_error = None

        return self._run_videos(failed)

    def reset_video(self, video_id: str) -> Video:
        """Return a video to the pending state; the cached transcript is kept."""
        video = self.videos.get_video(video_id)
        if video is None:
            raise VideoNotFoundError(video_id)

        self.videos.reset_processing(video_id)
        video.processed = False
        video.processing_error = None
        logger.info("Video reset for reprocessing: video_id=%s", video_id)
        return video

    def processing_status(self) -> dict[str, Any]:
        counts = self.videos.processing_counts()
        total = counts.get("total", 0)
        processed = counts.get("processed", 0)
        rate = round(processed / total * 100, 2) if total else 0.0
        return {**counts, "processing_rate": rate}
