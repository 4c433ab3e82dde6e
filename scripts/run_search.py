#!/usr/bin/env python3
"""
End-to-end run: index the articles file, then search once per portfolio tag
and save the results.
"""

import asyncio
import click
from dotenv import load_dotenv
from article_search.engine import ArticleVectorSearch
from article_search.utils.config import load_config
from article_search.utils.io import dump_results, load_articles_file, load_portfolio_tags, results_to_json
from article_search.utils.logger import setup_logger, logger


async def run(config, articles_file, portfolio_tags, top_k):
  async with ArticleVectorSearch(config) as search:
    logger.info("Indexing articles...")
    await search.index_articles(load_articles_file(articles_file))

    logger.info("Searching for similar articles...")
    return await search.search_similar_articles(portfolio_tags, top_k)


@click.command()
@click.option('--articles-file', default=None, help='JSON file with the articles')
@click.option('--portfolio-file', default=None,
        help='JSON/YAML file with [{portfolio_tag, text}], defaults to search.portfolio_tags')
@click.option('--output', default=None, help='Results file')
@click.option('--top-k', type=int, default=None, help='Neighbors per field')
@click.option('--config', 'config_path', default=None, help='Config file path')
def main(articles_file, portfolio_file, output, top_k, config_path):
  """Index articles and run the portfolio searches"""

  load_dotenv('.env')
  config = load_config(config_path)
  setup_logger(log_file=config['logging']['log_file'], level=config['logging']['level'])

  articles_file = articles_file or config['indexing'].get('articles_file', 'articles.json')
  output = output or config['search'].get('results_file', 'search_results.json')

  try:
    logger.info("=== Starting Vector Search System ===")

    if portfolio_file:
      portfolio_tags = load_portfolio_tags(portfolio_file)
    else:
      portfolio_tags = config['search'].get('portfolio_tags', [])

    results = asyncio.run(run(config, articles_file, portfolio_tags, top_k))

    print("\n=== RESULTS ===\n")
    print(results_to_json(results))

    dump_results(results, output)
  except Exception as e:
    logger.error(f"✗ Error: {e}")


if __name__ == "__main__":
  main()
