from __future__ import annotations

import pytest

from foodiefind.app.domain.errors import (
    InfluencerAlreadyExistsError,
    InfluencerNotFoundError,
    VideoAlreadyExistsError,
)
from foodiefind.app.domain.models import ChannelInfo, Influencer, VideoDetails
from foodiefind.app.services.catalog import CatalogService
from tests.unit.fakes import InMemoryInfluencerRepository, InMemoryVideoRepository, make_video


class VideoFetcherStub:
    def __init__(self) -> None:
        self.channels: dict[str, ChannelInfo] = {}
        self.videos: dict[str, VideoDetails] = {}
        self.channel_videos: list[VideoDetails] = []
        self.channel_info_calls: list[str] = []
        self.channel_video_calls: list[tuple[str, int]] = []

    def get_channel_info(self, channel_id: str) -> ChannelInfo:
        self.channel_info_calls.append(channel_id)
        return self.channels[channel_id]

    def get_video_details(self, video_id: str) -> VideoDetails:
        return self.videos[video_id]

    def get_channel_videos(self, channel_id: str, max_results: int = 50) -> list[VideoDetails]:
        self.channel_video_calls.append((channel_id, max_results))
        return list(self.channel_videos)


def make_service(
    videos: InMemoryVideoRepository | None = None,
    influencers: InMemoryInfluencerRepository | None = None,
) -> tuple[CatalogService, VideoFetcherStub]:
    fetcher = VideoFetcherStub()
    service = CatalogService(
        videos or InMemoryVideoRepository(),
        influencers or InMemoryInfluencerRepository(),
        fetcher,
    )
    return service, fetcher


TACO_CHANNEL = ChannelInfo(channel_id="UCtaco", name="Taco Tour", channel_url="https://youtube.com/channel/UCtaco")


class TestAddInfluencer:
    def test_creates_from_channel_info(self) -> None:
        service, fetcher = make_service()
        fetcher.channels["UCtaco"] = TACO_CHANNEL

        influencer = service.add_influencer("UCtaco")

        assert influencer.channel_id == "UCtaco"
        assert influencer.channel_name == "Taco Tour"

    def test_existing_channel(self) -> None:
        influencers = InMemoryInfluencerRepository([Influencer(id="inf-1", channel_id="UCtaco", channel_name="Taco Tour")])
        service, fetcher = make_service(influencers=influencers)

        with pytest.raises(InfluencerAlreadyExistsError):
            service.add_influencer("UCtaco")

        assert fetcher.channel_info_calls == []

    def test_handle_resolving_to_existing_channel(self) -> None:
        influencers = InMemoryInfluencerRepository([Influencer(id="inf-1", channel_id="UCtaco", channel_name="Taco Tour")])
        service, fetcher = make_service(influencers=influencers)
        fetcher.channels["@tacotour"] = TACO_CHANNEL

        with pytest.raises(InfluencerAlreadyExistsError):
            service.add_influencer("@tacotour")


class TestAddVideo:
    def test_creates_influencer_on_first_sight(self) -> None:
        videos = InMemoryVideoRepository()
        influencers = InMemoryInfluencerRepository()
        service, fetcher = make_service(videos, influencers)
        fetcher.channels["UCtaco"] = TACO_CHANNEL
        fetcher.videos["vid123"] = VideoDetails(
            video_id="vid123", title="Taco crawl", channel_id="UCtaco", duration_seconds=900
        )

        video = service.add_video("vid123")

        assert video.video_id == "vid123"
        assert video.processed is False
        influencer = influencers.get_by_channel_id("UCtaco")
        assert influencer is not None
        assert video.influencer_id == influencer.id

    def test_reuses_known_influencer(self) -> None:
        influencers = InMemoryInfluencerRepository([Influencer(id="inf-9", channel_id="UCtaco", channel_name="Taco Tour")])
        service, fetcher = make_service(influencers=influencers)
        fetcher.videos["vid123"] = VideoDetails(video_id="vid123", title="Taco crawl", channel_id="UCtaco")

        video = service.add_video("vid123")

        assert video.influencer_id == "inf-9"
        assert fetcher.channel_info_calls == []

    def test_existing_video(self) -> None:
        service, _ = make_service(videos=InMemoryVideoRepository([make_video("vid123")]))

        with pytest.raises(VideoAlreadyExistsError):
            service.add_video("vid123")


class TestSyncInfluencerVideos:
    def test_adds_new_and_skips_stored(self) -> None:
        videos = InMemoryVideoRepository([make_video("old1")])
        influencers = InMemoryInfluencerRepository([Influencer(id="inf-1", channel_id="UCtaco", channel_name="Taco Tour")])
        service, fetcher = make_service(videos, influencers)
        fetcher.channel_videos = [
            VideoDetails(video_id="old1", title="Old"),
            VideoDetails(video_id="new1", title="New one"),
            VideoDetails(video_id="new2", title="New two"),
        ]

        result = service.sync_influencer_videos("inf-1", max_results=10)

        assert [video.video_id for video in result.added] == ["new1", "new2"]
        assert result.skipped == 1
        assert result.failed == 0
        assert fetcher.channel_video_calls == [("UCtaco", 10)]

    def test_unknown_influencer(self) -> None:
        service, _ = make_service()

        with pytest.raises(InfluencerNotFoundError):
            service.sync_influencer_videos("missing")
