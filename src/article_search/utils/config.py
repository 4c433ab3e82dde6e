import os
import copy
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Automatically load when module is imported
_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / 'config' / 'config.yaml'

DEFAULTS: Dict[str, Any] = {
  'vector_store': {
    'url': 'http://localhost:6333',
    'collection_name': 'articles',
    'timeout': 30,
  },
  'models': {
    'embedding': {
      'model_name': 'BAAI/bge-m3',
      'dimension': 1024,
      'pooling': 'mean',
      'normalize': True,
      'cache_dir': None,
      'local_files_only': False,
      'device': 'cpu',
    },
  },
  'indexing': {
    'tags_delimiter': ', ',
    'deduplicate_by_link': False,
    'on_error': 'abort',
    'show_progress': True,
  },
  'search': {
    'top_k': 5,
    'sort_by_overall': False,
    'weights': {'summary': 0.5, 'title': 0.3, 'tags': 0.2},
  },
  'timeouts': {
    'embedding_seconds': 120,
    'store_seconds': 30,
  },
  'logging': {
    'log_file': 'logs/search.log',
    'level': 'INFO',
  },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
  """Recursively merge override into a copy of base"""
  merged = copy.deepcopy(base)
  for key, value in (override or {}).items():
    if isinstance(value, dict) and isinstance(merged.get(key), dict):
      merged[key] = _merge(merged[key], value)
    else:
      merged[key] = value
  return merged


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
  """
  Load the YAML configuration on top of the defaults.

  The file is taken from `path`, then ARTICLE_SEARCH_CONFIG, then config/config.yaml.
  QDRANT_URL, when set, overrides vector_store.url.
  """
  config_path = Path(path or os.environ.get('ARTICLE_SEARCH_CONFIG') or _CONFIG_PATH)

  data = {}
  if config_path.exists():
    with open(config_path, 'r', encoding='utf-8') as f:
      data = yaml.safe_load(f) or {}

  config = _merge(DEFAULTS, data)

  qdrant_url = os.environ.get('QDRANT_URL')
  if qdrant_url:
    config['vector_store']['url'] = qdrant_url

  return config


CONFIG = load_config()
