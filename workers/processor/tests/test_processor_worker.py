from __future__ import annotations

from unittest.mock import patch

import pytest

from foodiefind.app.domain.errors import WorkerConfigurationError
from foodiefind.app.domain.models import BatchFailure, BatchReport, ProcessingOutcome, TranscriptSource
from workers.processor import main as worker_main
from workers.processor.config import ProcessorConfig
from workers.processor.main import ProcessorWorker, RunSummary


class OrchestratorStub:
    def __init__(self) -> None:
        self.batch_report = BatchReport(
            total=2,
            processed=2,
            outcomes=[
                ProcessingOutcome(video_id="v1", transcript_source=TranscriptSource.CAPTIONS),
                ProcessingOutcome(video_id="v2", transcript_source=TranscriptSource.FALLBACK),
            ],
        )
        self.reprocess_report = BatchReport()
        self.batch_calls: list[int] = []
        self.reprocess_calls: list[int] = []

    def run_batch(self, limit: int = 5) -> BatchReport:
        self.batch_calls.append(limit)
        return self.batch_report

    def reprocess_failed(self, limit: int = 3) -> BatchReport:
        self.reprocess_calls.append(limit)
        return self.reprocess_report


class EnricherStub:
    def __init__(self) -> None:
        self.runs = 0

    def enrich_all(self) -> dict[str, int]:
        self.runs += 1
        return {"enhanced": 3, "failed": 1, "total": 4}


def create_test_config() -> ProcessorConfig:
    return ProcessorConfig(
        batch_limit=5,
        reprocess_failed_limit=0,
        enrich_restaurants=False,
        enrich_delay_seconds=0.0,
        supabase_url="https://test.supabase.co",
        supabase_key="test-key",
        gemini_api_key="test-gemini-key",
        gemini_model="gemini-2.5-flash",
        llm_temperature=0.3,
        llm_max_tokens=2000,
        rapidapi_key="",
        rapidapi_host="",
        google_maps_api_key="",
    )


class TestProcessorConfig:
    def test_configuration_validation_passes(self) -> None:
        assert create_test_config().validate() == []

    def test_configuration_validation_missing_gemini_key(self) -> None:
        config = create_test_config()
        config.gemini_api_key = ""

        assert "GEMINI_API_KEY is required" in config.validate()

    def test_enrichment_requires_maps_key(self) -> None:
        config = create_test_config()
        config.enrich_restaurants = True

        assert "GOOGLE_MAPS_API_KEY is required when enrichment is enabled" in config.validate()

    def test_negative_reprocess_limit(self) -> None:
        config = create_test_config()
        config.reprocess_failed_limit = -1

        assert "PROCESSING_REPROCESS_LIMIT cannot be negative" in config.validate()


class TestProcessorWorkerRun:
    def test_runs_batch_only_by_default(self) -> None:
        orchestrator = OrchestratorStub()
        enricher = EnricherStub()

        summary = ProcessorWorker(create_test_config(), orchestrator, enricher).run()

        assert orchestrator.batch_calls == [5]
        assert orchestrator.reprocess_calls == []
        assert enricher.runs == 0
        assert summary.reprocessed is None
        assert summary.failed == 0

    def test_reprocesses_when_limit_set(self) -> None:
        config = create_test_config()
        config.reprocess_failed_limit = 3
        orchestrator = OrchestratorStub()
        orchestrator.reprocess_report = BatchReport(
            total=1,
            failed=1,
            errors=[BatchFailure(video_id="v9", title="Taco crawl", error="Gemini API rate limit reached")],
        )

        summary = ProcessorWorker(config, orchestrator).run()

        assert orchestrator.reprocess_calls == [3]
        assert summary.failed == 1
        assert summary.to_dict()["reprocessed"]["errors"][0]["videoId"] == "v9"

    def test_enriches_when_enabled(self) -> None:
        config = create_test_config()
        config.enrich_restaurants = True
        config.google_maps_api_key = "maps-key"
        enricher = EnricherStub()

        summary = ProcessorWorker(config, OrchestratorStub(), enricher).run()

        assert enricher.runs == 1
        assert summary.enrichment == {"enhanced": 3, "failed": 1, "total": 4}

    def test_invalid_configuration_raises(self) -> None:
        config = create_test_config()
        config.supabase_url = ""

        with pytest.raises(WorkerConfigurationError) as exc_info:
            ProcessorWorker(config, OrchestratorStub()).run()

        assert "SUPABASE_URL is required" in exc_info.value.errors


class TestRunSummary:
    def test_failed_counts_both_passes(self) -> None:
        summary = RunSummary(batch=BatchReport(failed=2), reprocessed=BatchReport(failed=1))

        assert summary.failed == 3


class TestMain:
    def test_invalid_configuration_exit_code(self) -> None:
        config = create_test_config()
        config.supabase_key = ""

        with patch.object(worker_main, "get_config", return_value=config):
            assert worker_main.main() == 2

    def test_exit_code_reflects_failures(self) -> None:
        orchestrator = OrchestratorStub()
        orchestrator.batch_report = BatchReport(total=1, failed=1)

        with patch.object(worker_main, "get_config", return_value=create_test_config()), patch.object(
            worker_main, "create_default_dependencies", return_value=(orchestrator, None)
        ):
            assert worker_main.main() == 1

    def test_exit_code_success(self) -> None:
        with patch.object(worker_main, "get_config", return_value=create_test_config()), patch.object(
            worker_main, "create_default_dependencies", return_value=(OrchestratorStub(), None)
        ):
            assert worker_main.main() == 0
