from datetime import datetime, timezone
from typing import Optional, Dict, Any
from dataclasses import dataclass
from bson import ObjectId
from dateutil import parser
from video_collector.utils.logger import logger


def format_timestamp(value: datetime) -> str:
  """RFC 3339 in UTC, the format the search API expects and returns"""
  if value.tzinfo is None:
    value = value.replace(tzinfo=timezone.utc)
  return value.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')


@dataclass
class Video:
  """One discovered video, deduplicated by youtube_id"""
  youtube_id: str
  title: str = ''
  description: str = ''
  published_at: Optional[datetime] = None
  thumbnail_url: str = ''
  id: Optional[ObjectId] = None

  def to_dict(self) -> Dict[str, Any]:
    """Convert to dictionary for MongoDB, empty fields are left out"""
    data = {
      "_id": self.id,
      "youtubeId": self.youtube_id,
      "title": self.title,
      "description": self.description,
      "publishedAt": self.published_at,
      "thumbnailUrl": self.thumbnail_url,
    }
    return {k: v for k, v in data.items() if v}

  def to_json(self) -> Dict[str, Any]:
    """JSON-safe representation for API responses"""
    data = self.to_dict()
    if '_id' in data:
      data['_id'] = str(data['_id'])
    if 'publishedAt' in data:
      data['publishedAt'] = format_timestamp(data['publishedAt'])
    return data

  @classmethod
  def from_dict(cls, data: Dict[str, Any]) -> 'Video':
    """
    Create Video from MongoDB document.

    Raises KeyError, TypeError or ValueError for documents that do not
    have the stored video shape.
    """
    published_at = data.get('publishedAt')
    if published_at is not None and not isinstance(published_at, datetime):
      raise ValueError(f"publishedAt is not a datetime: {published_at!r}")

    youtube_id = data['youtubeId']
    if not isinstance(youtube_id, str):
      raise TypeError(f"youtubeId is not a string: {youtube_id!r}")

    return cls(
      id = data.get('_id'),
      youtube_id = youtube_id,
      title = data.get('title', ''),
      description = data.get('description', ''),
      published_at = published_at,
      thumbnail_url = data.get('thumbnailUrl', '')
    )

  @classmethod
  def from_search_item(cls, item: Dict[str, Any]) -> 'Video':
    """Create Video from one item of a search.list response"""
    snippet = item['snippet']
    thumbnails = snippet.get('thumbnails') or {}

    video = cls(
      youtube_id = item['id']['videoId'],
      title = snippet.get('title', ''),
      description = snippet.get('description', ''),
      thumbnail_url = (thumbnails.get('default') or {}).get('url', '')
    )

    # Keep the video even if the date is unusable
    try:
      video.published_at = parser.isoparse(snippet['publishedAt'])
    except (KeyError, AttributeError, TypeError, ValueError):
      logger.error(f"✗ Unable to parse publishedAt for video {video.youtube_id}")

    return video
