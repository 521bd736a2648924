import requests
from datetime import datetime
from typing import Dict, List, Any, Optional
from video_collector.models.video import Video, format_timestamp
from video_collector.utils.logger import logger
from video_collector.utils.config import CONFIG


class YouTubeClient:
  """YouTube Data API search client"""

  def __init__(self, youtube_config: Optional[Dict[str, Any]] = None, session: Optional[requests.Session] = None):
    youtube_config = youtube_config or CONFIG['youtube']

    self.api_key = youtube_config['api_key']
    self.search_url = youtube_config['search_url']
    self.max_results = youtube_config.get('max_results', 50)
    self.timeout = youtube_config.get('request_timeout', 30)
    self.session = session or requests.Session()

  def search_videos(self, keyword: str, since: datetime) -> List[Video]:
    """
    Fetch one page of videos for keyword published after `since`.

    Failures are logged and reported as an empty result, the caller's
    loop must keep going.
    """
    params = {
      "key": self.api_key,
      "part": "id,snippet",
      "q": keyword,
      "type": "video",
      "publishedAfter": format_timestamp(since),
      "maxResults": self.max_results,
    }

    try:
      response = self.session.get(self.search_url, params = params, timeout = self.timeout)
      response.raise_for_status()
      payload = response.json()
    except requests.RequestException as e:
      logger.error(f"✗ Unable to get search results: {e}")
      return []
    except ValueError as e:
      logger.error(f"✗ Invalid search response: {e}")
      return []

    items = payload.get('items', []) if isinstance(payload, dict) else None
    if not isinstance(items, list):
      logger.error(f"✗ Invalid search response: no items list in {type(payload).__name__}")
      return []

    videos = []
    for item in items:
      try:
        videos.append(Video.from_search_item(item))
      except (KeyError, AttributeError, TypeError) as e:
        logger.error(f"✗ Skipping malformed search item: {e}")
    return videos
