from datetime import datetime, timezone

import pytest
from bson import ObjectId

from video_collector.models.video import Video, format_timestamp


def _search_item(**snippet):
  base = {
    "title": "Live set",
    "description": "Recorded live",
    "publishedAt": "2024-03-05T10:20:30Z",
    "thumbnails": {"default": {"url": "https://i.ytimg.com/vi/abc/default.jpg"}},
  }
  base.update(snippet)
  return {"id": {"kind": "youtube#video", "videoId": "abc"}, "snippet": base}


def test_from_search_item():
  video = Video.from_search_item(_search_item())
  assert video.youtube_id == "abc"
  assert video.title == "Live set"
  assert video.description == "Recorded live"
  assert video.thumbnail_url == "https://i.ytimg.com/vi/abc/default.jpg"
  assert video.published_at == datetime(2024, 3, 5, 10, 20, 30, tzinfo=timezone.utc)


def test_unparsable_published_at_keeps_video():
  video = Video.from_search_item(_search_item(publishedAt="not a date"))
  assert video.youtube_id == "abc"
  assert video.published_at is None
  assert "publishedAt" not in video.to_dict()


def test_to_dict_uses_stored_field_names():
  published = datetime(2024, 1, 1, tzinfo=timezone.utc)
  video = Video(youtube_id="abc", title="t", published_at=published)
  assert video.to_dict() == {"youtubeId": "abc", "title": "t", "publishedAt": published}


def test_to_json_is_serializable():
  oid = ObjectId()
  video = Video(
    id=oid,
    youtube_id="abc",
    title="t",
    description="d",
    published_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
    thumbnail_url="u",
  )
  assert video.to_json() == {
    "_id": str(oid),
    "youtubeId": "abc",
    "title": "t",
    "description": "d",
    "publishedAt": "2024-01-01T12:00:00Z",
    "thumbnailUrl": "u",
  }


def test_naive_timestamps_are_utc():
  assert format_timestamp(datetime(1970, 1, 1)) == "1970-01-01T00:00:00Z"


@pytest.mark.parametrize("document", [
  {"title": "no youtube id"},
  {"youtubeId": 42},
  {"youtubeId": "abc", "publishedAt": "2024-01-01"},
])
def test_from_dict_rejects_malformed_documents(document):
  with pytest.raises((KeyError, TypeError, ValueError)):
    Video.from_dict(document)
