from typing import Any, Dict, Optional
from qdrant_client import models
from article_search.database.vector_store import CollectionExistsError, VectorStoreClient
from article_search.exceptions import SchemaMismatchError
from article_search.models.article import FIELD_NAMES
from article_search.utils.logger import logger
from article_search.utils.config import CONFIG


class CollectionSchemaManager:
  """Create the article collection and check its named vectors"""

  def __init__(
    self,
    store: VectorStoreClient,
    collection_name: str,
    dimension: int
  ):
    self.store = store
    self.collection_name = collection_name
    self.dimension = dimension
    self._verified = False

  @classmethod
  def from_config(cls, store: VectorStoreClient, config: Optional[Dict[str, Any]] = None) -> 'CollectionSchemaManager':
    config = config or CONFIG
    return cls(
      store = store,
      collection_name = config['vector_store']['collection_name'],
      dimension = int(config['models']['embedding']['dimension'])
    )

  async def ensure_collection(self) -> None:
    """Create the collection when absent, then verify its schema"""
    if self._verified:
      return

    existing = await self.store.list_collections()
    if self.collection_name not in existing:
      try:
        await self.store.create_collection(self.collection_name, FIELD_NAMES, self.dimension)
        logger.info(f"✓ Collection '{self.collection_name}' created")
      except CollectionExistsError:
        logger.info(f"ℹ Collection '{self.collection_name}' created concurrently, reusing it")

    await self.verify_schema()
    self._verified = True

  async def verify_schema(self) -> None:
    """Raise SchemaMismatchError if the collection does not match the embedding model"""
    params = await self.store.get_vector_params(self.collection_name)

    if set(params) != set(FIELD_NAMES):
      raise SchemaMismatchError(
        f"Collection '{self.collection_name}' has vectors {sorted(params)}, "
        f"expected {sorted(FIELD_NAMES)}"
      )

    for name in FIELD_NAMES:
      vector_params = params[name]
      if vector_params.size != self.dimension:
        raise SchemaMismatchError(
          f"Vector '{name}' of '{self.collection_name}' has size {vector_params.size}, "
          f"the embedding model produces {self.dimension}"
        )
      if vector_params.distance != models.Distance.COSINE:
        raise SchemaMismatchError(
          f"Vector '{name}' of '{self.collection_name}' uses {vector_params.distance} distance, "
          f"expected Cosine"
        )

  async def delete_collection(self) -> None:
    """Drop the whole collection (use with caution!)"""
    await self.store.delete_collection(self.collection_name)
    self._verified = False
    logger.warning(f"⚠ Collection '{self.collection_name}' deleted")
