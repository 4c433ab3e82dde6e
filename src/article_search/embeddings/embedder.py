import asyncio
from typing import Any, Dict, List, Optional
from article_search.embeddings.provider import EmbeddingProvider, SentenceTransformerProvider
from article_search.exceptions import ArticleSearchError, EmbeddingError, SchemaMismatchError
from article_search.utils.concurrency import with_timeout
from article_search.utils.logger import logger
from article_search.utils.config import CONFIG


class FieldEmbedder:
  """
  Owns the embedding provider and turns field texts into vectors.

  The provider is initialized once, by the first caller; concurrent first callers wait
  for the same initialization. Model work runs in a worker thread so the event loop stays free.
  """

  def __init__(
    self,
    provider: EmbeddingProvider,
    dimension: int,
    timeout: Optional[float] = None
  ):
    self.provider = provider
    self.dimension = dimension
    self.timeout = timeout
    self._ready = False
    self._init_lock = asyncio.Lock()

  @classmethod
  def from_config(
    cls,
    config: Optional[Dict[str, Any]] = None,
    provider: Optional[EmbeddingProvider] = None
  ) -> 'FieldEmbedder':
    config = config or CONFIG
    embedding_config = config['models']['embedding']
    return cls(
      provider = provider or SentenceTransformerProvider.from_config(embedding_config),
      dimension = int(embedding_config['dimension']),
      timeout = config['timeouts'].get('embedding_seconds')
    )

  @property
  def ready(self) -> bool:
    return self._ready

  async def initialize(self) -> None:
    """Load the provider if nobody did it yet"""
    if self._ready:
      return

    async with self._init_lock:
      if self._ready:
        return

      await asyncio.to_thread(self.provider.initialize)

      actual = self.provider.dimension
      if actual != self.dimension:
        raise SchemaMismatchError(
          f"Embedding model produces {actual}-dimensional vectors, "
          f"configured dimension is {self.dimension}"
        )
      self._ready = True

  async def embed(self, text: str) -> Optional[List[float]]:
    """Embed a text, None for empty or whitespace-only text"""
    if not text or not text.strip():
      return None

    await self.initialize()

    try:
      return await with_timeout(
        asyncio.to_thread(self.provider.embed, text),
        self.timeout,
        "Embedding"
      )
    except ArticleSearchError:
      raise
    except Exception as e:
      logger.error(f"✗ Embedding failed: {e}")
      raise EmbeddingError(f"Embedding failed: {e}") from e
