from flask import Blueprint, Flask, current_app, jsonify, request
from pymongo.errors import PyMongoError
from typing import Dict, Any, Optional
from video_collector.database.mongodb_client import MongoDBClient
from video_collector.server.pagination import PageRequest, build_envelope, read_page
from video_collector.utils.logger import logger
from video_collector.utils.config import CONFIG

PLAIN_TEXT = {'Content-Type': 'text/plain; charset=utf-8'}

videos_bp = Blueprint('videos', __name__)


class KeywordNotFoundError(Exception):
  """No collection exists for the requested keyword"""

  def __init__(self, keyword: str):
    self.keyword = keyword
    super().__init__(f"Videos for {keyword} are not being collected")


@videos_bp.route('/videos/<path:keyword>', methods=['GET'])
def get_videos(keyword):
  """Paginated, optionally searched videos for a keyword"""
  db = current_app.config['VIDEO_DB']
  server_config = current_app.config['VIDEO_SERVER']

  if not db.collection_exists(keyword):
    raise KeywordNotFoundError(keyword)

  page_request = PageRequest.from_args(
    request.args,
    default_limit = server_config['default_limit'],
    max_limit = server_config['max_limit']
  )

  # limit+1, so we know if next exists
  cursor = db.find_videos(
    keyword,
    skip = page_request.skip,
    limit = page_request.limit + 1,
    search = page_request.search
  )
  videos, has_next = read_page(cursor, page_request.limit)

  return jsonify(build_envelope(
    page_request,
    videos,
    has_next,
    request.base_url,
    request.args.to_dict(flat = False)
  ))


def handle_unknown_keyword(e: KeywordNotFoundError):
  return str(e), 400, PLAIN_TEXT


def handle_store_error(e: PyMongoError):
  logger.error(f"✗ Cannot get videos: {e}")
  return "Internal error", 500, PLAIN_TEXT


def create_app(db: Optional[MongoDBClient] = None, server_config: Optional[Dict[str, Any]] = None) -> Flask:
  """Build the query service, connecting to MongoDB unless `db` is given"""
  app = Flask(__name__)
  app.config['VIDEO_DB'] = db or MongoDBClient()
  app.config['VIDEO_SERVER'] = server_config or CONFIG['server']

  app.register_blueprint(videos_bp)
  app.register_error_handler(KeywordNotFoundError, handle_unknown_keyword)
  app.register_error_handler(PyMongoError, handle_store_error)
  return app
