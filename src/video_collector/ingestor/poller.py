import time
from concurrent.futures import Future
from datetime import datetime, timezone
from typing import Callable, Optional
from video_collector.ingestor.persister import VideoPersister
from video_collector.youtube.youtube_client import YouTubeClient
from video_collector.utils.logger import logger

EPOCH = datetime(1970, 1, 1, tzinfo = timezone.utc)


def utcnow() -> datetime:
  return datetime.now(timezone.utc)


class Poller:
  """Poll the search API for one keyword and hand new videos to the persister"""

  def __init__(
      self,
      youtube: YouTubeClient,
      persister: VideoPersister,
      keyword: str,
      poll_interval: float = 10,
      fetch_backlog: bool = True,
      sleep: Callable[[float], None] = time.sleep,
      clock: Callable[[], datetime] = utcnow):
    self.youtube = youtube
    self.persister = persister
    self.keyword = keyword
    self.poll_interval = poll_interval
    self.sleep = sleep
    self.clock = clock

    # The first cycle asks for everything the provider returns, unless
    # configured to start from now
    self.last_fetched_time = EPOCH if fetch_backlog else clock()

  def poll_once(self) -> Optional[Future]:
    """Run one cycle without the sleep, returns the save handle if one was queued"""
    videos = self.youtube.search_videos(self.keyword, self.last_fetched_time)
    logger.info(f"FETCHED: {len(videos)}")

    pending = None
    if videos:
      pending = self.persister.submit(self.keyword, videos)

    self.last_fetched_time = self.clock()
    return pending

  def run(self, max_cycles: Optional[int] = None):
    """Poll forever (or `max_cycles` times), sleeping poll_interval between cycles"""
    logger.info(f"Polling videos for '{self.keyword}' every {self.poll_interval} seconds")
    cycles = 0
    while max_cycles is None or cycles < max_cycles:
      try:
        self.poll_once()
      except Exception as e:
        logger.error(f"✗ Poll cycle failed: {e}", exc_info = True)
      cycles += 1
      self.sleep(self.poll_interval)
