#!/usr/bin/env python3
"""
Video Query Service

Serves GET /videos/<keyword>?page=&limit=&search= over the collections
filled by the ingestion worker.
"""

import sys
import click
from dotenv import load_dotenv
from pymongo.errors import PyMongoError
from video_collector.utils.logger import setup_logger, logger
from video_collector.utils.config import load_config, validate_config, ConfigError
from video_collector.database.mongodb_client import MongoDBClient
from video_collector.server import create_app


@click.command()
@click.option('--host', default=None, help='Interface to bind (default from config)')
@click.option('--port', type=int, default=None, help='Port to listen on (default from config)')
@click.option('--debug', is_flag=True, help='Enable debug logging')

def main(host, port, debug):
  """Run the videos query service"""

  load_dotenv('.env')
  config = load_config()
  setup_logger(
    log_file=config['logging']['log_file'],
    level="DEBUG" if debug else config['logging']['level']
  )

  try:
    validate_config(config)
  except ConfigError as e:
    logger.error(f"✗ {e}")
    sys.exit(1)

  try:
    db = MongoDBClient(config['database'])
  except PyMongoError as e:
    logger.error(f"✗ Mongo connection failed: {e}")
    sys.exit(1)

  server_config = config['server']
  app = create_app(db, server_config)
  try:
    app.run(
      host=host or server_config['host'],
      port=port or server_config['port'],
      threaded=True
    )
  finally:
    db.close()


if __name__ == "__main__":
  main()
