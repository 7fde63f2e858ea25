from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any

from foodiefind.app.domain.errors import WorkerConfigurationError
from foodiefind.app.domain.models import BatchReport
from foodiefind.app.services.processing_pipeline import ProcessingOrchestrator
from foodiefind.services.maps import MapsEnricher
from workers.processor.config import ProcessorConfig, get_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("processor-worker")


@dataclass
class RunSummary:
    batch: BatchReport
    reprocessed: BatchReport | None = None
    enrichment: dict[str, int] | None = None

    @property
    def failed(self) -> int:
        return self.batch.failed + (self.reprocessed.failed if self.reprocessed else 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "batch": self.batch.to_dict(),
            "reprocessed": self.reprocessed.to_dict() if self.reprocessed else None,
            "enrichment": self.enrichment,
        }


class ProcessorWorker:
    """
    One-shot batch run, meant to be triggered by an external scheduler.

    Processes pending videos, optionally retries failed ones and optionally
    runs the maps enrichment pass afterwards.
    """

    def __init__(
        self,
        config: ProcessorConfig,
        orchestrator: ProcessingOrchestrator,
        enricher: MapsEnricher | None = None,
    ):
        self.config = config
        self.orchestrator = orchestrator
        self.enricher = enricher

    def run(self) -> RunSummary:
        self._validate_configuration()
        logger.info(
            "Starting processing run: batch_limit=%d, reprocess_limit=%d, enrich=%s",
            self.config.batch_limit,
            self.config.reprocess_failed_limit,
            self.config.enrich_restaurants,
        )

        summary = RunSummary(batch=self.orchestrator.run_batch(self.config.batch_limit))
        self._log_report("batch", summary.batch)

        if self.config.reprocess_failed_limit > 0:
            summary.reprocessed = self.orchestrator.reprocess_failed(self.config.reprocess_failed_limit)
            self._log_report("reprocess", summary.reprocessed)

        if self.config.enrich_restaurants and self.enricher is not None:
            summary.enrichment = self.enricher.enrich_all()

        logger.info("Processing run complete: failed=%d", summary.failed)
        return summary

    def _validate_configuration(self) -> None:
        errors = self.config.validate()
        if errors:
            raise WorkerConfigurationError(errors)

    @staticmethod
    def _log_report(label: str, report: BatchReport) -> None:
        logger.info(
            "%s: total=%d, processed=%d, failed=%d",
            label,
            report.total,
            report.processed,
            report.failed,
        )
        for failure in report.errors:
            logger.warning("%s failure: video_id=%s, error=%s", label, failure.video_id, failure.error)


def create_default_dependencies(config: ProcessorConfig) -> tuple[ProcessingOrchestrator, MapsEnricher | None]:
    from supabase import create_client

    from foodiefind.app.infra.db.supabase_repo import (
        SupabaseRecommendationRepository,
        SupabaseRestaurantRepository,
        SupabaseVideoRepository,
    )
    from foodiefind.services.extractor import RecommendationExtractor
    from foodiefind.services.gemini_client import GeminiClient
    from foodiefind.services.maps import PlacesClient
    from foodiefind.services.resolver import RestaurantResolver
    from foodiefind.services.timestamps import TimestampReconciler
    from foodiefind.services.transcripts import (
        RapidApiTranscriptProvider,
        TranscriptAcquirer,
        YouTubeCaptionSource,
    )

    client = create_client(config.supabase_url, config.supabase_key)
    restaurants = SupabaseRestaurantRepository(client)

    orchestrator = ProcessingOrchestrator(
        videos=SupabaseVideoRepository(client),
        recommendations=SupabaseRecommendationRepository(client),
        acquirer=TranscriptAcquirer(
            YouTubeCaptionSource(),
            RapidApiTranscriptProvider(config.rapidapi_key or None, config.rapidapi_host or None),
        ),
        extractor=RecommendationExtractor(
            GeminiClient(config.gemini_api_key, model_name=config.gemini_model),
            temperature=config.llm_temperature,
            max_tokens=config.llm_max_tokens,
        ),
        reconciler=TimestampReconciler(),
        resolver=RestaurantResolver(restaurants),
    )

    enricher = None
    if config.enrich_restaurants:
        enricher = MapsEnricher(
            PlacesClient(config.google_maps_api_key),
            restaurants,
            delay_seconds=config.enrich_delay_seconds,
        )

    return orchestrator, enricher


def main() -> int:
    config = get_config()

    errors = config.validate()
    if errors:
        logger.error("Invalid worker configuration: %s", ", ".join(errors))
        return 2

    orchestrator, enricher = create_default_dependencies(config)
    summary = ProcessorWorker(config, orchestrator, enricher).run()
    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
