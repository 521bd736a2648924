import pymongo
from pymongo import IndexModel
from pymongo.errors import BulkWriteError, PyMongoError
from typing import Dict, List, Any, Optional
from video_collector.database.collections import CollectionCache
from video_collector.models.video import Video
from video_collector.utils.logger import logger
from video_collector.utils.config import CONFIG

DUPLICATE_KEY_ERROR = 11000


class MongoDBClient:
  """MongoDB client for per-keyword video storage and retrieval"""

  def __init__(self, db_config: Optional[Dict[str, Any]] = None, database = None):
    """
    Initialize MongoDB client.

    `database` takes an already connected database handle; otherwise a
    connection is opened from `db_config` (default: CONFIG['database'])
    and checked with a ping.
    """
    self.db_config = db_config or CONFIG['database']
    self.client = None

    if database is None:
      self.client = pymongo.MongoClient(self.db_config['mongodb_uri'])
      self.client.admin.command('ping')
      logger.info("✓ MongoDB connection successful!")
      database = self.client[self.db_config['database_name']]

    self.db = database
    self.collections = CollectionCache(self.db.list_collection_names)

  def close(self):
    if self.client is not None:
      self.client.close()

  def collection_exists(self, keyword: str) -> bool:
    """Check whether videos for keyword are being collected"""
    return self.collections.exists(keyword)

  def create_indexes(self, collection) -> List[str]:
    """
    Create the indexes every video collection carries:
    publishedAt descending for reverse chronological order,
    a text index on title and description for search,
    a unique index on youtubeId so duplicates are rejected.
    """
    indexes = [
      IndexModel([("publishedAt", pymongo.DESCENDING)]),
      IndexModel([("title", pymongo.TEXT), ("description", pymongo.TEXT)]),
      IndexModel([("youtubeId", pymongo.ASCENDING)], unique = True),
    ]
    try:
      names = collection.create_indexes(indexes)
    except PyMongoError as e:
      logger.error(f"✗ Failed to create indexes on '{collection.name}': {e}")
      return []
    logger.info(f"✓ Successfully created indexes: {names}")
    return names

  def save_videos(self, keyword: str, videos: List[Video]) -> int:
    """
    Insert a batch of videos into the keyword's collection.

    Indexes are created first if the collection is new. The insert is
    unordered, so duplicate youtubeIds are skipped without stopping the
    rest of the batch. Returns the number of inserted documents.
    """
    collection = self.db[keyword]
    if not self.collection_exists(keyword):
      if self.create_indexes(collection):
        self.collections.add(keyword)

    documents = [video.to_dict() for video in videos]
    try:
      result = collection.insert_many(documents, ordered = False)
    except BulkWriteError as e:
      write_errors = e.details.get('writeErrors', [])
      inserted = e.details.get('nInserted', 0)
      duplicates = sum(1 for err in write_errors if err.get('code') == DUPLICATE_KEY_ERROR)
      if duplicates < len(write_errors):
        logger.error(f"✗ DB update failed for '{keyword}': {len(write_errors) - duplicates} write errors")
      if duplicates:
        logger.info(f"ℹ Skipped {duplicates} videos already stored in '{keyword}'")
      logger.info(f"✓ Inserted {inserted} documents into '{keyword}'")
      return inserted

    inserted = len(result.inserted_ids)
    logger.info(f"✓ Inserted {inserted} documents into '{keyword}'")
    return inserted

  def find_videos(
      self,
      keyword: str,
      skip: int = 0,
      limit: int = 0,
      search: Optional[str] = None):
    """
    Find videos in the keyword's collection, most recent first.

    A non-empty `search` is matched against the title/description text
    index. Returns the raw pymongo cursor.
    """
    filter_dict = {'$text': {'$search': search}} if search else {}
    return self.db[keyword].find(
      filter_dict,
      sort = [("publishedAt", pymongo.DESCENDING)],
      skip = skip,
      limit = limit
    )

  def list_keywords(self) -> List[str]:
    """All keywords that currently have a collection"""
    names = list(self.db.list_collection_names())
    self.collections.merge(names)
    return sorted(names)

  def get_statistics(self, keyword: str) -> Dict[str, Any]:
    """Get collection statistics"""
    collection = self.db[keyword]
    total_videos = collection.count_documents({})

    oldest = collection.find_one(sort = [("publishedAt", pymongo.ASCENDING)])
    newest = collection.find_one(sort = [("publishedAt", pymongo.DESCENDING)])

    return {
      "total_videos": total_videos,
      "date_range": {
        "oldest": oldest.get('publishedAt') if oldest else None,
        "newest": newest.get('publishedAt') if newest else None
      }
    }
