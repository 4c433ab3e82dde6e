#!/usr/bin/env python3
"""
Collection Setup Script

Create the article collection in Qdrant and verify its named vectors
"""

import asyncio
import click
from dotenv import load_dotenv
from article_search.database.schema import CollectionSchemaManager
from article_search.database.vector_store import VectorStoreClient
from article_search.utils.config import load_config
from article_search.utils.logger import setup_logger


async def setup(config, drop):
  store = VectorStoreClient.from_config(config)
  schema = CollectionSchemaManager.from_config(store, config)

  try:
    if drop:
      await schema.delete_collection()
      return

    print(f"\nConnecting to Qdrant at {store.url}...")
    await schema.ensure_collection()

    params = await store.get_vector_params(schema.collection_name)
    count = await store.count(schema.collection_name)

    print("\n✓ Collection ready!")
    print(f"\nCollection: {schema.collection_name}")
    print(f"  Points: {count}")
    for name, vector_params in params.items():
      print(f"  {name}: size={vector_params.size}, distance={vector_params.distance}")
  finally:
    await store.close()


@click.command()
@click.option('--config', 'config_path', default=None, help='Config file path')
@click.option('--drop', is_flag=True, help='Delete the collection (DANGEROUS!)')
def main(config_path, drop):
  """Setup and verify the vector collection"""

  load_dotenv('.env')
  config = load_config(config_path)
  setup_logger(log_file=config['logging']['log_file'], level=config['logging']['level'])

  print("="*80)
  print("COLLECTION SETUP")
  print("="*80)

  if drop:
    response = input("⚠ WARNING: This will delete all indexed articles! Type 'YES' to confirm: ")
    if response != "YES":
      print("Aborted.")
      return

  try:
    asyncio.run(setup(config, drop))
  except Exception as e:
    print(f"\n✗ Error: {e}")
    print("\nTroubleshooting:")
    print("  1. Ensure Qdrant is running (docker run -p 6333:6333 qdrant/qdrant)")
    print("  2. Check QDRANT_URL or vector_store.url in config/config.yaml")
    print("  3. Check that models.embedding.dimension matches the existing collection")


if __name__ == "__main__":
  main()
