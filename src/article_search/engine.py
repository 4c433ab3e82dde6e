from typing import Any, Dict, List, Optional, Union
from qdrant_client import AsyncQdrantClient
from article_search.database.schema import CollectionSchemaManager
from article_search.database.vector_store import VectorStoreClient
from article_search.embeddings.embedder import FieldEmbedder
from article_search.embeddings.provider import EmbeddingProvider
from article_search.indexing.index_builder import IndexBuilder
from article_search.models.article import FusedResult, IndexReport
from article_search.search.orchestrator import SearchOrchestrator
from article_search.utils.logger import logger
from article_search.utils.config import CONFIG


class ArticleVectorSearch:
  """Multi-field article index: title, summary and tags vectors fused at query time"""

  def __init__(
    self,
    config: Optional[Dict[str, Any]] = None,
    embedding_provider: Optional[EmbeddingProvider] = None,
    client: Optional[AsyncQdrantClient] = None
  ):
    self.config = config or CONFIG

    self.embedder = FieldEmbedder.from_config(self.config, provider=embedding_provider)
    self.store = VectorStoreClient.from_config(self.config, client=client)
    self.schema = CollectionSchemaManager.from_config(self.store, self.config)
    self.indexer = IndexBuilder.from_config(self.embedder, self.store, self.schema, self.config)
    self.searcher = SearchOrchestrator.from_config(self.embedder, self.store, self.schema, self.config)

    logger.info(f"✓ Article search ready (collection '{self.schema.collection_name}')")

  async def __aenter__(self) -> 'ArticleVectorSearch':
    return self

  async def __aexit__(self, *exc_info) -> None:
    await self.close()

  async def index_articles(self, articles_data: Union[Dict[str, Any], List[Any]]) -> IndexReport:
    """Index {"articles": [...]} or a plain list of articles"""
    if isinstance(articles_data, dict):
      articles_data = articles_data.get('articles') or []
    return await self.indexer.index_articles(articles_data)

  async def search(self, query_text: str, top_k: Optional[int] = None) -> List[FusedResult]:
    return await self.searcher.search(query_text, top_k)

  async def search_similar_articles(
      self,
      portfolio_tags: List[Dict[str, str]],
      top_k: Optional[int] = None) -> List[Dict[str, Any]]:
    """Search once per portfolio tag"""
    return await self.searcher.search_many(portfolio_tags, top_k)

  async def delete_collection(self) -> None:
    await self.schema.delete_collection()

  async def close(self) -> None:
    await self.store.close()
