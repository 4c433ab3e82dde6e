from typing import Any, Dict, List, Optional
from article_search.database.schema import CollectionSchemaManager
from article_search.database.vector_store import VectorStoreClient
from article_search.embeddings.embedder import FieldEmbedder
from article_search.models.article import FusedResult, FIELD_NAMES
from article_search.search.fusion import ScoreFusion
from article_search.utils.concurrency import run_all
from article_search.utils.logger import logger
from article_search.utils.config import CONFIG


class SearchOrchestrator:
  """Query the three named vectors with one embedding and fuse the results"""

  def __init__(
    self,
    embedder: FieldEmbedder,
    store: VectorStoreClient,
    schema: CollectionSchemaManager,
    fusion: Optional[ScoreFusion] = None,
    default_top_k: int = 5
  ):
    self.embedder = embedder
    self.store = store
    self.schema = schema
    self.collection_name = schema.collection_name
    self.fusion = fusion or ScoreFusion()
    self.default_top_k = default_top_k

  @classmethod
  def from_config(
    cls,
    embedder: FieldEmbedder,
    store: VectorStoreClient,
    schema: CollectionSchemaManager,
    config: Optional[Dict[str, Any]] = None
  ) -> 'SearchOrchestrator':
    search_config = (config or CONFIG)['search']
    return cls(
      embedder,
      store,
      schema,
      fusion = ScoreFusion(
        weights = search_config.get('weights'),
        sort_by_overall = search_config.get('sort_by_overall', False)
      ),
      default_top_k = int(search_config.get('top_k', 5))
    )

  async def search(self, query_text: str, top_k: Optional[int] = None) -> List[FusedResult]:
    """Fused results for query_text, up to top_k hits per field"""
    top_k = self.default_top_k if top_k is None else top_k
    if top_k < 1:
      raise ValueError(f"top_k must be >= 1, got {top_k}")

    # Creates the collection if absent and refuses a mismatched one
    await self.schema.ensure_collection()

    query_vector = await self.embedder.embed(query_text)
    if query_vector is None:
      logger.info("ℹ Empty query, nothing to search")
      return []

    title_hits, summary_hits, tag_hits = await run_all(*(
      self.store.search(self.collection_name, name, query_vector, top_k, with_payload=True)
      for name in FIELD_NAMES
    ))
    logger.debug(
      f"Hits per field: title={len(title_hits)} summary={len(summary_hits)} tags={len(tag_hits)}"
    )

    return self.fusion.fuse(title_hits, summary_hits, tag_hits)

  async def search_many(self, queries: List[Dict[str, str]], top_k: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Run one search per query.

    Args:
      queries: List of {"portfolio_tag": ..., "text": ...}
      top_k: Hits per field

    Returns:
      List of {"portfolio_tag", "query", "results"} in input order
    """
    output = []
    for query in queries:
      results = await self.search(query['text'], top_k)
      logger.info(f"✓ {query.get('portfolio_tag', query['text'])}: {len(results)} articles")
      output.append({
        "portfolio_tag": query.get('portfolio_tag'),
        "query": query['text'],
        "results": results
      })
    return output
