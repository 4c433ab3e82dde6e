#!/usr/bin/env python3
"""
Article Ingestion Script

Index articles from a JSON file into Qdrant, one vector per title, summary and tags.

JSON format:
{
  "articles": [
    {
      "original_link": "https://example.com/article",
      "published_time": "2026-01-06T17:41:00.000Z",
      "tags": ["Tax", "IRS"],
      "formatted_data": {
        "title": "Sample Article",
        "introductory_paragraph": "First paragraph.",
        "descriptive_paragraph": "<p>Body, may contain HTML.</p>"
      }
    }
  ]
}
"""

import sys
import asyncio
import click
from dotenv import load_dotenv
from article_search.engine import ArticleVectorSearch
from article_search.utils.config import load_config
from article_search.utils.io import load_articles_file
from article_search.utils.logger import setup_logger, logger


async def ingest(config, articles_file, clear_db):
  async with ArticleVectorSearch(config) as search:
    if clear_db:
      await search.delete_collection()

    articles = load_articles_file(articles_file)
    return await search.index_articles(articles)


@click.command()
@click.option('--articles-file', default=None, help='JSON file with the articles')
@click.option('--config', 'config_path', default=None, help='Config file path')
@click.option('--skip-failed/--abort-on-error', default=None,
        help='Skip articles that fail to embed instead of aborting the batch')
@click.option('--dedup/--no-dedup', default=None,
        help='Derive point ids from article links so re-runs overwrite')
@click.option('--clear-db', is_flag=True,
        help='Delete the collection before ingestion (DANGEROUS!)')
def main(articles_file, config_path, skip_failed, dedup, clear_db):
  """Index articles into the vector store"""

  load_dotenv('.env')
  config = load_config(config_path)
  setup_logger(log_file=config['logging']['log_file'], level=config['logging']['level'])

  if skip_failed is not None:
    config['indexing']['on_error'] = 'skip' if skip_failed else 'abort'
  if dedup is not None:
    config['indexing']['deduplicate_by_link'] = dedup
  articles_file = articles_file or config['indexing'].get('articles_file', 'articles.json')

  print("="*80)
  print("ARTICLE INGESTION")
  print("="*80)

  if clear_db:
    response = input("⚠ WARNING: This will delete all indexed articles! Type 'YES' to confirm: ")
    if response != "YES":
      print("Aborted.")
      return

  try:
    report = asyncio.run(ingest(config, articles_file, clear_db))
  except Exception as e:
    logger.error(f"✗ Fatal error: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)

  print("\n" + "="*80)
  print("INGESTION COMPLETE")
  print("="*80)
  print(f"✓ Indexed: {report.indexed}")
  print(f"✗ Failed: {len(report.failed)}")
  for link in report.failed:
    print(f"  - {link}")


if __name__ == "__main__":
  main()
