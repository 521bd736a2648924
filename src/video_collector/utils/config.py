import os
import yaml
from copy import deepcopy
from pathlib import Path
from typing import Dict, Any, Optional
from video_collector.utils.logger import logger


class ConfigError(Exception):
  """Raised when a required setting is missing"""


_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / 'config' / 'config.yaml'

DEFAULTS = {
  'database': {
    'mongodb_uri': 'mongodb://0.0.0.0:27017',
    'database_name': None,
  },
  'youtube': {
    'api_key': None,
    'search_url': 'https://www.googleapis.com/youtube/v3/search',
    'max_results': 50,
    'request_timeout': 30,
  },
  'ingestion': {
    'poll_interval': 10,
    'max_workers': 4,
    'fetch_backlog': True,
  },
  'server': {
    'host': '0.0.0.0',
    'port': 8080,
    'default_limit': 10,
    'max_limit': 50,
  },
  'logging': {
    'level': 'INFO',
    'log_file': 'logs/video_collector.log',
  },
}

# (env var, section, key)
ENV_OVERRIDES = [
  ('API_KEY', 'youtube', 'api_key'),
  ('MONGO_URI', 'database', 'mongodb_uri'),
  ('MONGO_DB', 'database', 'database_name'),
  ('POLL_INTERVAL', 'ingestion', 'poll_interval'),
]


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
  for key, value in (override or {}).items():
    if isinstance(value, dict) and isinstance(base.get(key), dict):
      _merge(base[key], value)
    else:
      base[key] = value
  return base


def load_config(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
  """
  Build the configuration dictionary.

  Built-in defaults are overlaid with config.yaml (when present) and then
  with environment variables, which always win.
  """
  path = Path(path) if path else _CONFIG_PATH
  environ = os.environ if environ is None else environ

  config = deepcopy(DEFAULTS)
  if path.exists():
    with open(path, 'r', encoding='utf-8') as f:
      _merge(config, yaml.safe_load(f) or {})

  for env_var, section, key in ENV_OVERRIDES:
    value = environ.get(env_var)
    if value:
      config[section][key] = value

  try:
    config['ingestion']['poll_interval'] = int(config['ingestion']['poll_interval'])
  except (TypeError, ValueError):
    fallback = DEFAULTS['ingestion']['poll_interval']
    logger.warning(f"Unable to set polling interval. Defaulting to {fallback} seconds")
    config['ingestion']['poll_interval'] = fallback

  return config


def validate_config(config: Dict[str, Any], require_api_key: bool = False) -> None:
  """Fail fast on settings without a usable default"""
  if not config['database'].get('database_name'):
    raise ConfigError("MONGO_DB missing")
  if require_api_key and not config['youtube'].get('api_key'):
    raise ConfigError("Missing API_KEY")


# Automatically load when module is imported. This runs before any
# load_dotenv() call and before setup_logger(), so .env values are not
# seen here; scripts call load_config() again after loading .env and pass
# the result explicitly.
CONFIG = load_config()
