from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional
from pymongo.errors import PyMongoError
from video_collector.database.mongodb_client import MongoDBClient
from video_collector.models.video import Video
from video_collector.utils.logger import logger


class VideoPersister:
  """
  Saves video batches on a background worker pool.

  `submit` only queues the batch and returns a Future, it never waits on
  the database. The queue is unbounded: when writes are slower than the
  poll interval, batches pile up. Batches from consecutive cycles may
  run concurrently and in any order.
  """

  def __init__(self, db: MongoDBClient, max_workers: int = 4):
    self.db = db
    self.executor = ThreadPoolExecutor(max_workers = max_workers, thread_name_prefix = "persist")

  def submit(self, keyword: str, videos: List[Video]) -> Future:
    """Queue a batch, the Future resolves to the inserted count (None on failure)"""
    return self.executor.submit(self._save, keyword, list(videos))

  def _save(self, keyword: str, videos: List[Video]) -> Optional[int]:
    try:
      return self.db.save_videos(keyword, videos)
    except PyMongoError as e:
      logger.error(f"✗ DB update failed for '{keyword}': {e}")
      return None
    except Exception as e:
      logger.error(f"✗ DB update failed for '{keyword}': {e}", exc_info = True)
      return None

  def shutdown(self, wait: bool = True):
    self.executor.shutdown(wait = wait)
