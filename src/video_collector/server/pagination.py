"""
Page parameters and page envelope for the videos endpoint.

A page is fetched with limit+1 documents: the extra one only tells us
whether a next page exists and is never returned.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlencode
from video_collector.models.video import Video
from video_collector.utils.logger import logger


def parse_int(value: Optional[str], default: int, minimum: int = 0) -> int:
  """Integer query parameter, `default` when absent, unparsable or below `minimum`"""
  try:
    number = int(value)
  except (TypeError, ValueError):
    return default
  return number if number >= minimum else default


@dataclass
class PageRequest:
  page: int = 0
  limit: int = 10
  search: str = ''

  @property
  def skip(self) -> int:
    return self.page * self.limit

  @classmethod
  def from_args(cls, args: Mapping[str, str], default_limit: int = 10, max_limit: int = 50) -> 'PageRequest':
    """Read page, limit and search from query arguments"""
    page = parse_int(args.get('page'), 0)
    limit = parse_int(args.get('limit'), default_limit, minimum = 1)
    if limit > max_limit:
      logger.warning(f"Limit {limit} exceeds maximum, using {max_limit}")
      limit = max_limit
    return cls(page = page, limit = limit, search = (args.get('search') or '').strip())


def read_page(documents: Iterable[Dict[str, Any]], limit: int) -> Tuple[List[Video], bool]:
  """
  Decode up to `limit` documents, returns (videos, has_next).

  Documents that do not decode are logged and skipped.
  """
  videos = []
  has_next = False
  for position, document in enumerate(documents):
    if position >= limit:
      has_next = True
      break
    try:
      videos.append(Video.from_dict(document))
    except (KeyError, TypeError, ValueError) as e:
      logger.error(f"✗ Failed to decode result {document.get('_id')}: {e}")
  return videos, has_next


def page_url(base_url: str, args: Mapping[str, Sequence[str]], page: int) -> str:
  """Same request with only the page parameter replaced"""
  query = {key: list(values) for key, values in args.items()}
  query['page'] = [str(page)]
  return f"{base_url}?{urlencode(sorted(query.items()), doseq = True)}"


def build_envelope(
    page_request: PageRequest,
    videos: List[Video],
    has_next: bool,
    base_url: str,
    args: Mapping[str, Sequence[str]]) -> Dict[str, Any]:
  """Page envelope with prev/next links, links are omitted when absent"""
  envelope = {
    "page": page_request.page,
    "limit": page_request.limit,
    "result": [video.to_json() for video in videos],
  }
  if page_request.page != 0:
    envelope["prev"] = page_url(base_url, args, page_request.page - 1)
  if has_next:
    envelope["next"] = page_url(base_url, args, page_request.page + 1)
  return envelope
