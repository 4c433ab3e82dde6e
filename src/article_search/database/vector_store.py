from typing import Any, Awaitable, Dict, List, Optional, Sequence
from qdrant_client import AsyncQdrantClient, models
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse
from article_search.exceptions import StoreUnavailableError
from article_search.models.article import IndexedPoint, SearchHit
from article_search.utils.concurrency import with_timeout
from article_search.utils.logger import logger
from article_search.utils.config import CONFIG


class CollectionExistsError(Exception):
  """Another process created the collection first"""


class VectorStoreClient:
  """Qdrant client for named-vector collections"""

  def __init__(
    self,
    client: Optional[AsyncQdrantClient] = None,
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    http_timeout: int = 30
  ):
    """Wrap an existing client or connect to url"""
    self.url = url or CONFIG['vector_store']['url']
    self.timeout = timeout
    self.client = client or AsyncQdrantClient(url=self.url, timeout=http_timeout)

  @classmethod
  def from_config(
    cls,
    config: Optional[Dict[str, Any]] = None,
    client: Optional[AsyncQdrantClient] = None
  ) -> 'VectorStoreClient':
    config = config or CONFIG
    return cls(
      client = client,
      url = config['vector_store']['url'],
      timeout = config['timeouts'].get('store_seconds'),
      http_timeout = int(config['vector_store'].get('timeout', 30))
    )

  async def _call(self, what: str, aw: Awaitable[Any]) -> Any:
    try:
      return await with_timeout(aw, self.timeout, what)
    except (ResponseHandlingException, ConnectionError) as e:
      logger.error(f"✗ Vector store unreachable at {self.url} ({what}): {e}")
      raise StoreUnavailableError(f"Vector store unreachable at {self.url}: {e}") from e

  async def list_collections(self) -> List[str]:
    response = await self._call("list collections", self.client.get_collections())
    return [c.name for c in response.collections]

  async def create_collection(self, name: str, vector_names: Sequence[str], size: int) -> None:
    """Create a collection with one cosine vector space per name"""
    vectors_config = {
      vector_name: models.VectorParams(size=size, distance=models.Distance.COSINE)
      for vector_name in vector_names
    }
    try:
      await self._call(
        "create collection",
        self.client.create_collection(collection_name=name, vectors_config=vectors_config)
      )
    except UnexpectedResponse as e:
      if e.status_code == 409:
        raise CollectionExistsError(name) from e
      raise

  async def get_vector_params(self, name: str) -> Dict[str, models.VectorParams]:
    """Named vector configuration of a collection"""
    info = await self._call("get collection", self.client.get_collection(collection_name=name))
    vectors = info.config.params.vectors
    if isinstance(vectors, models.VectorParams):
      # Single unnamed vector space
      return {"": vectors}
    return dict(vectors or {})

  async def upsert(self, name: str, points: List[IndexedPoint], wait: bool = True) -> None:
    """Insert or overwrite points, waiting for durability by default"""
    structs = [
      models.PointStruct(id=point.id, vector=point.vectors, payload=point.payload)
      for point in points
    ]
    await self._call(
      "upsert",
      self.client.upsert(collection_name=name, points=structs, wait=wait)
    )

  async def search(
      self,
      name: str,
      vector_name: str,
      vector: List[float],
      limit: int,
      with_payload: bool = True) -> List[SearchHit]:
    """Nearest neighbors of vector in one named vector space"""
    response = await self._call(
      f"search {vector_name}",
      self.client.query_points(
        collection_name=name,
        query=vector,
        using=vector_name,
        limit=limit,
        with_payload=with_payload
      )
    )
    return [
      SearchHit(id=str(point.id), score=float(point.score), payload=point.payload or {})
      for point in response.points
    ]

  async def count(self, name: str) -> int:
    response = await self._call("count", self.client.count(collection_name=name, exact=True))
    return response.count

  async def delete_collection(self, name: str) -> None:
    await self._call("delete collection", self.client.delete_collection(collection_name=name))

  async def close(self) -> None:
    await self.client.close()
