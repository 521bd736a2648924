"""Pytest fixtures: an in-memory stand-in for a pymongo database.

FakeDatabase/FakeCollection cover only what MongoDBClient calls:
list_collection_names, create_indexes, insert_many (unordered, with the
unique youtubeId index enforced once created), find with sort/skip/limit
and a word-match `$text` filter, count_documents and find_one.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import BulkWriteError, ServerSelectionTimeoutError

from video_collector.database.mongodb_client import MongoDBClient
from video_collector.models.video import Video

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeCollection:
  def __init__(self, database, name):
    self.database = database
    self.name = name
    self.documents = []
    self.index_calls = []
    self.unique_fields = set()
    self.fail_find = False

  def create_indexes(self, models):
    self.index_calls.append(models)
    self.database.existing.add(self.name)
    names = []
    for model in models:
      document = model.document
      if document.get('unique'):
        self.unique_fields.update(document['key'].keys())
      names.append(document['name'])
    return names

  def insert_many(self, documents, ordered=True):
    self.database.existing.add(self.name)
    inserted_ids = []
    write_errors = []
    for index, document in enumerate(documents):
      duplicate = any(
        field in document and any(d.get(field) == document[field] for d in self.documents)
        for field in self.unique_fields
      )
      if duplicate:
        write_errors.append({'index': index, 'code': 11000, 'errmsg': 'E11000 duplicate key error'})
        if ordered:
          break
        continue
      document.setdefault('_id', ObjectId())
      self.documents.append(dict(document))
      inserted_ids.append(document['_id'])
    if write_errors:
      raise BulkWriteError({'writeErrors': write_errors, 'nInserted': len(inserted_ids)})
    return SimpleNamespace(inserted_ids=inserted_ids)

  def _matching(self, filter_dict):
    if '$text' not in filter_dict:
      return list(self.documents)
    words = filter_dict['$text']['$search'].lower().split()
    matches = []
    for document in self.documents:
      text = f"{document.get('title', '')} {document.get('description', '')}".lower()
      if any(word in text.split() for word in words):
        matches.append(document)
    return matches

  def find(self, filter_dict=None, sort=None, skip=0, limit=0):
    if self.fail_find:
      raise ServerSelectionTimeoutError("no servers available")
    documents = self._matching(filter_dict or {})
    for field, direction in reversed(sort or []):
      present = [d for d in documents if isinstance(d.get(field), datetime)]
      missing = [d for d in documents if not isinstance(d.get(field), datetime)]
      present.sort(key=lambda d: d[field], reverse=direction < 0)
      documents = present + missing if direction < 0 else missing + present
    documents = documents[skip:]
    if limit:
      documents = documents[:limit]
    return iter([dict(d) for d in documents])

  def count_documents(self, filter_dict):
    return len(self._matching(filter_dict))

  def find_one(self, filter_dict=None, sort=None):
    return next(self.find(filter_dict, sort=sort, limit=1), None)


class FakeDatabase:
  def __init__(self):
    self.collections = {}
    self.existing = set()
    self.list_calls = 0
    self.fail_listing = False

  def __getitem__(self, name):
    if name not in self.collections:
      self.collections[name] = FakeCollection(self, name)
    return self.collections[name]

  def list_collection_names(self):
    self.list_calls += 1
    if self.fail_listing:
      raise ServerSelectionTimeoutError("no servers available")
    return sorted(self.existing)


def make_video(n, **overrides):
  fields = {
    'youtube_id': f"vid{n:03d}",
    'title': f"Video {n}",
    'description': f"Description of video {n}",
    'published_at': BASE_TIME + timedelta(hours=n),
    'thumbnail_url': f"https://i.ytimg.com/vi/vid{n:03d}/default.jpg",
  }
  fields.update(overrides)
  return Video(**fields)


@pytest.fixture
def fake_db():
  return FakeDatabase()


@pytest.fixture
def db_client(fake_db):
  return MongoDBClient({'mongodb_uri': 'mongodb://unused', 'database_name': 'test'}, database=fake_db)


@pytest.fixture
def music_db(db_client):
  """Client whose 'music' collection holds 12 videos, vid001 oldest, vid012 newest"""
  db_client.save_videos('music', [make_video(n) for n in range(1, 13)])
  return db_client
