#!/usr/bin/env python3
"""
Video Ingestion Worker

Polls the YouTube search API for a keyword and stores new videos in the
keyword's MongoDB collection. Runs until killed.
"""

import sys
import click
from dotenv import load_dotenv
from pymongo.errors import PyMongoError
from video_collector.utils.logger import setup_logger, logger
from video_collector.utils.config import load_config, validate_config, ConfigError
from video_collector.database.mongodb_client import MongoDBClient
from video_collector.youtube.youtube_client import YouTubeClient
from video_collector.ingestor import Poller, VideoPersister


@click.command()
@click.option('--poll-interval', type=int, default=None,
              help='Seconds between polls (overrides POLL_INTERVAL)')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.argument('keyword')

def main(poll_interval, debug, keyword):
  """Collect videos for KEYWORD"""

  load_dotenv('.env')
  config = load_config()
  setup_logger(
    log_file=config['logging']['log_file'],
    level="DEBUG" if debug else config['logging']['level']
  )

  try:
    validate_config(config, require_api_key=True)
  except ConfigError as e:
    logger.error(f"✗ {e}")
    sys.exit(1)

  try:
    db = MongoDBClient(config['database'])
  except PyMongoError as e:
    logger.error(f"✗ Mongo connection failed: {e}")
    sys.exit(1)

  ingestion_config = config['ingestion']
  persister = VideoPersister(db, max_workers=ingestion_config['max_workers'])
  poller = Poller(
    YouTubeClient(config['youtube']),
    persister,
    keyword,
    poll_interval=poll_interval or ingestion_config['poll_interval'],
    fetch_backlog=ingestion_config['fetch_backlog']
  )

  try:
    poller.run()
  except KeyboardInterrupt:
    logger.info("Stopping, waiting for pending saves")
  finally:
    persister.shutdown()
    db.close()


if __name__ == "__main__":
  main()
