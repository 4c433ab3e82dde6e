#!/usr/bin/env python3
"""
Query Script for the article vector search
"""

import asyncio
import click
from colorama import Fore, Style, init
from dotenv import load_dotenv
from article_search.engine import ArticleVectorSearch
from article_search.utils.config import load_config
from article_search.utils.io import dump_results
from article_search.utils.logger import setup_logger, logger


# Initialize colorama
init(autoreset = True)


def print_results(query, results):
  """Pretty print fused results"""

  print(f"\n{Fore.CYAN}{'='*80}")
  print(f"QUERY: {query}")
  print('='*80 + Style.RESET_ALL)

  if not results:
    print(f"\n{Fore.YELLOW}No matching articles{Style.RESET_ALL}")
    return

  for i, result in enumerate(results, 1):
    relevance = result.relevance()
    print(f"\n{Fore.MAGENTA}[{i}] {result.title}{Style.RESET_ALL}")
    print(f"    URL: {Fore.BLUE}{result.link}{Style.RESET_ALL}")
    print(f"    Overall: {Fore.GREEN}{relevance['overall']}{Style.RESET_ALL}")
    print(f"    Title: {relevance['title']}  Summary: {relevance['summary']}  Tags: {relevance['tags']}")


async def run_query(config, query, top_k):
  async with ArticleVectorSearch(config) as search:
    return await search.search(query, top_k)


@click.command()
@click.argument('query')
@click.option('--top-k', type=int, default=None, help='Neighbors per field')
@click.option('--output', default=None, help='Write results as JSON to this file')
@click.option('--sort/--no-sort', default=None, help='Sort results by overall relevance')
@click.option('--config', 'config_path', default=None, help='Config file path')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def main(query, top_k, output, sort, config_path, debug):
  """Search indexed articles"""

  load_dotenv('.env')
  config = load_config(config_path)
  setup_logger(log_file=config['logging']['log_file'], level=config['logging']['level'])

  if debug:
    logger.setLevel("DEBUG")
    logger.debug("Debug mode enabled")

  if sort is not None:
    config['search']['sort_by_overall'] = sort

  try:
    results = asyncio.run(run_query(config, query, top_k))
  except Exception as e:
    logger.error(f"✗ Error: {e}")
    import traceback
    traceback.print_exc()
    return

  print_results(query, results)

  if output:
    dump_results(results, output)


if __name__ == "__main__":
  main()
