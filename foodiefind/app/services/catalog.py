# foodiefind/app/services/catalog.py
"""
Registration of influencers and videos from YouTube metadata.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from foodiefind.app.domain.errors import (
    InfluencerAlreadyExistsError,
    InfluencerNotFoundError,
    ProcessingError,
    VideoAlreadyExistsError,
)
from foodiefind.app.domain.models import Influencer, Video
from foodiefind.app.infra.db.base import InfluencerRepository, VideoRepository
from foodiefind.services.fetcher import DEFAULT_MAX_CHANNEL_VIDEOS, VideoFetcher

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    influencer_id: str
    added: list[Video] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0


class CatalogService:
    def __init__(
        self,
        videos: VideoRepository,
        influencers: InfluencerRepository,
        fetcher: VideoFetcher,
    ) -> None:
        self.videos = videos
        self.influencers = influencers
        self.fetcher = fetcher

    def get_or_create_influencer(self, channel_id: str) -> Influencer:
        influencer = self.influencers.get_by_channel_id(channel_id)
        if influencer is not None:
            return influencer

        channel = self.fetcher.get_channel_info(channel_id)
        if channel.channel_id != channel_id:
            existing = self.influencers.get_by_channel_id(channel.channel_id)
            if existing is not None:
                return existing
        return self.influencers.create_influencer(channel)

    def add_influencer(self, channel_id: str) -> Influencer:
        """Register a channel; raises InfluencerAlreadyExistsError when it is already stored."""
        if self.influencers.get_by_channel_id(channel_id) is not None:
            raise InfluencerAlreadyExistsError(channel_id)

        channel = self.fetcher.get_channel_info(channel_id)
        if self.influencers.get_by_channel_id(channel.channel_id) is not None:
            raise InfluencerAlreadyExistsError(channel.channel_id)

        return self.influencers.create_influencer(channel)

    def add_video(self, video_id: str) -> Video:
        """Fetch and store a video, creating its influencer on first sight."""
        if self.videos.get_video(video_id) is not None:
            raise VideoAlreadyExistsError(video_id)

        details = self.fetcher.get_video_details(video_id)
        if not details.channel_id:
            raise ProcessingError(f"Video has no channel: {video_id}")

        influencer = self.get_or_create_influencer(details.channel_id)
        video = self.videos.create_video(details, influencer.id)
        logger.info("Video added: video_id=%s, influencer=%s", video_id, influencer.channel_name)
        return video

    def sync_influencer_videos(
        self,
        influencer_id: str,
        max_results: int = DEFAULT_MAX_CHANNEL_VIDEOS,
    ) -> SyncResult:
        """Store the channel's newest suitable videos, skipping the ones already stored."""
        influencer = self.influencers.get_influencer(influencer_id)
        if influencer is None:
            raise InfluencerNotFoundError(influencer_id)

        result = SyncResult(influencer_id=influencer_id)
        for details in self.fetcher.get_channel_videos(influencer.channel_id, max_results):
            if self.videos.get_video(details.video_id) is not None:
                result.skipped += 1
                continue
            try:
                result.added.append(self.videos.create_video(details, influencer.id))
            except ProcessingError as error:
                logger.warning("Could not store video %s: %s", details.video_id, error)
                result.failed += 1

        logger.info(
            "Channel sync: influencer=%s, added=%d, skipped=%d, failed=%d",
            influencer.channel_name,
            len(result.added),
            result.skipped,
            result.failed,
        )
        return result
