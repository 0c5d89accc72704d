import asyncio
import logging

import aiohttp

from models.errors import VideoLookupError
from models.job import VideoReference
from utils.env import Settings
from utils.http import HttpStatusError, fetch_json

logger = logging.getLogger("youtube_service")

YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"


class YoutubeService:
    def __init__(self, settings: Settings, session: aiohttp.ClientSession) -> None:
        self.api_key = settings.YOUTUBE_API_KEY
        self.session = session

    async def get_latest_video(self, channel_id: str) -> VideoReference:
        """Resolve the newest upload of `channel_id`. Single attempt, never retried."""
        if not channel_id or not channel_id.strip():
            raise VideoLookupError("channel id is required")

        params = {
            "key": self.api_key,
            "channelId": channel_id,
            "part": "snippet,id",
            "order": "date",
            "maxResults": 1,
            "type": "video",
        }
        try:
            data = await fetch_json(self.session, "GET", YOUTUBE_SEARCH_URL, params=params)
        except (HttpStatusError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise VideoLookupError(f"channel search for {channel_id} failed: {e}") from e

        items = data.get("items") or []
        if not isinstance(items, list):
            raise VideoLookupError(f"unexpected search items for channel {channel_id}: {items!r}")
        if not items:
            raise VideoLookupError(f"no videos found for channel {channel_id}")

        item = items[0]
        if not isinstance(item, dict):
            raise VideoLookupError(f"unexpected search item for channel {channel_id}: {item!r}")
        item_id = item.get("id")
        if not isinstance(item_id, dict):
            raise VideoLookupError(f"unexpected item id for channel {channel_id}: {item_id!r}")
        video_id = item_id.get("videoId")
        if not video_id or not isinstance(video_id, str):
            raise VideoLookupError(f"latest item for channel {channel_id} has no video id")

        snippet = item.get("snippet")
        if not isinstance(snippet, dict):
            snippet = {}
        video = VideoReference(
            video_id=video_id,
            title=snippet.get("title", ""),
            published_at=snippet.get("publishedAt"),
        )
        logger.info(f"Latest video for {channel_id}: {video.video_id} ({video.title!r})")
        return video
