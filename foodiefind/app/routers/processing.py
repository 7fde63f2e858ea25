# foodiefind/app/routers/processing.py
"""
Admin routes that drive the video-to-recommendation pipeline.
"""
from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from foodiefind.app.config import settings
from foodiefind.app.deps import get_catalog_service, get_orchestrator, require_admin
from foodiefind.app.domain.errors import ProcessingError
from foodiefind.app.schemas.processing import (
    AddAndProcessRequest,
    BatchRequest,
    BatchResponse,
    ProcessingResponse,
    ProcessingStatusResponse,
    ReprocessRequest,
)
from foodiefind.app.services.catalog import CatalogService
from foodiefind.app.services.processing_pipeline import ProcessingOrchestrator
from foodiefind.services.errors import ServiceError
from foodiefind.services.ids import extract_video_id

from .common import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/processing", tags=["processing"], dependencies=[Depends(require_admin)])


@router.post("/video/{video_id}", response_model=ProcessingResponse)
async def process_video(
    video_id: str,
    orchestrator: ProcessingOrchestrator = Depends(get_orchestrator),
) -> ProcessingResponse:
    try:
        outcome = await run_in_threadpool(orchestrator.process_video_id, video_id)
    except (ProcessingError, ServiceError) as exc:
        raise to_http_exception(exc)
    return ProcessingResponse.from_outcome(outcome)


@router.post("/videos/batch", response_model=BatchResponse)
async def process_batch(
    payload: BatchRequest | None = Body(default=None),
    orchestrator: ProcessingOrchestrator = Depends(get_orchestrator),
) -> BatchResponse:
    limit = payload.limit if payload else settings.PROCESSING_BATCH_LIMIT
    try:
        report = await run_in_threadpool(orchestrator.run_batch, limit)
    except ProcessingError as exc:
        raise to_http_exception(exc)

    message = "Batch processing completed" if report.total else "No unprocessed videos found"
    return BatchResponse.from_report(report, message)


@router.get("/status", response_model=ProcessingStatusResponse)
async def processing_status(
    orchestrator: ProcessingOrchestrator = Depends(get_orchestrator),
) -> ProcessingStatusResponse:
    try:
        counts = await run_in_threadpool(orchestrator.processing_status)
    except ProcessingError as exc:
        raise to_http_exception(exc)
    return ProcessingStatusResponse(**counts)


@router.post("/reprocess-failed", response_model=BatchResponse)
async def reprocess_failed(
    payload: ReprocessRequest | None = Body(default=None),
    orchestrator: ProcessingOrchestrator = Depends(get_orchestrator),
) -> BatchResponse:
    limit = payload.limit if payload else ReprocessRequest().limit
    try:
        report = await run_in_threadpool(orchestrator.reprocess_failed, limit)
    except ProcessingError as exc:
        raise to_http_exception(exc)

    message = "Reprocessing completed" if report.total else "No failed videos to reprocess"
    return BatchResponse.from_report(report, message)


@router.post("/video/{video_id}/reset")
async def reset_video(
    video_id: str,
    orchestrator: ProcessingOrchestrator = Depends(get_orchestrator),
) -> dict:
    try:
        video = await run_in_threadpool(orchestrator.reset_video, video_id)
    except ProcessingError as exc:
        raise to_http_exception(exc)
    return {"message": "Video reset for reprocessing", "video": asdict(video)}


@router.post("/add-and-process", response_model=ProcessingResponse, status_code=status.HTTP_201_CREATED)
async def add_and_process(
    payload: AddAndProcessRequest,
    catalog: CatalogService = Depends(get_catalog_service),
    orchestrator: ProcessingOrchestrator = Depends(get_orchestrator),
) -> ProcessingResponse:
    video_id = extract_video_id(payload.videoUrl)
    if not video_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid YouTube video URL")

    try:
        video = await run_in_threadpool(catalog.add_video, video_id)
        outcome = await run_in_threadpool(orchestrator.process_video, video)
    except (ProcessingError, ServiceError) as exc:
        raise to_http_exception(exc)
    return ProcessingResponse.from_outcome(outcome, message="Video added and processed successfully")
