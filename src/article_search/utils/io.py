import json
import yaml
from pathlib import Path
from typing import Any, Dict, List, Union
from article_search.models.article import Article, FusedResult
from article_search.utils.logger import logger


def load_articles_file(path: Union[str, Path]) -> List[Article]:
  """Load articles from a JSON file shaped {"articles": [...]}"""
  with open(path, 'r', encoding='utf-8') as f:
    data = json.load(f)

  records = (data.get('articles') if isinstance(data, dict) else data) or []
  articles = [Article.from_dict(record) for record in records]
  logger.info(f"Loaded {len(articles)} articles from {path}")
  return articles


def load_portfolio_tags(path: Union[str, Path]) -> List[Dict[str, str]]:
  """Load [{portfolio_tag, text}] from a JSON or YAML file"""
  path = Path(path)
  with open(path, 'r', encoding='utf-8') as f:
    if path.suffix.lower() in ('.yaml', '.yml'):
      data = yaml.safe_load(f) or []
    else:
      data = json.load(f)

  if isinstance(data, dict):
    data = data.get('portfolio_tags', [])

  for entry in data:
    if not entry.get('text'):
      raise ValueError(f"Portfolio tag without text in {path}: {entry}")
  return data


def _to_serializable(value: Any) -> Any:
  if isinstance(value, FusedResult):
    return value.to_dict()
  if isinstance(value, dict):
    return {k: _to_serializable(v) for k, v in value.items()}
  if isinstance(value, list):
    return [_to_serializable(v) for v in value]
  return value


def dump_results(results: Any, path: Union[str, Path]) -> None:
  """Write search results as indented JSON"""
  with open(path, 'w', encoding='utf-8') as f:
    json.dump(_to_serializable(results), f, indent=2, ensure_ascii=False, default=str)
  logger.info(f"✓ Results saved to {path}")


def results_to_json(results: Any) -> str:
  return json.dumps(_to_serializable(results), indent=2, ensure_ascii=False, default=str)
