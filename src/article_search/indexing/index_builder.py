import uuid
from typing import Any, Dict, Iterable, List, Optional, Union
from tqdm import tqdm
from article_search.database.schema import CollectionSchemaManager
from article_search.database.vector_store import VectorStoreClient
from article_search.embeddings.embedder import FieldEmbedder
from article_search.exceptions import EmbeddingError, OperationTimeoutError
from article_search.models.article import Article, FieldText, IndexedPoint, IndexReport, FIELD_NAMES
from article_search.utils.concurrency import run_all
from article_search.utils.logger import logger
from article_search.utils.config import CONFIG

ON_ERROR_POLICIES = ("abort", "skip")


class IndexBuilder:
  """Turn articles into points with title, summary and tags vectors and upsert them"""

  def __init__(
    self,
    embedder: FieldEmbedder,
    store: VectorStoreClient,
    schema: CollectionSchemaManager,
    tags_delimiter: str = ", ",
    deduplicate_by_link: bool = False,
    on_error: str = "abort",
    show_progress: bool = True
  ):
    if on_error not in ON_ERROR_POLICIES:
      raise ValueError(f"on_error must be one of {ON_ERROR_POLICIES}, got '{on_error}'")

    self.embedder = embedder
    self.store = store
    self.schema = schema
    self.tags_delimiter = tags_delimiter
    self.deduplicate_by_link = deduplicate_by_link
    self.on_error = on_error
    self.show_progress = show_progress

  @classmethod
  def from_config(
    cls,
    embedder: FieldEmbedder,
    store: VectorStoreClient,
    schema: CollectionSchemaManager,
    config: Optional[Dict[str, Any]] = None
  ) -> 'IndexBuilder':
    indexing_config = (config or CONFIG)['indexing']
    return cls(
      embedder,
      store,
      schema,
      tags_delimiter = indexing_config.get('tags_delimiter', ', '),
      deduplicate_by_link = indexing_config.get('deduplicate_by_link', False),
      on_error = indexing_config.get('on_error', 'abort'),
      show_progress = indexing_config.get('show_progress', True)
    )

  def point_id(self, article: Article) -> str:
    """Fresh UUID, or a stable one derived from the link when deduplicating"""
    if self.deduplicate_by_link and article.original_link:
      return str(uuid.uuid5(uuid.NAMESPACE_URL, article.original_link))
    return str(uuid.uuid4())

  async def build_point(self, article: Article) -> IndexedPoint:
    """Embed the three fields concurrently and assemble the point"""
    texts = FieldText.from_article(article, self.tags_delimiter)

    vectors = await run_all(*(self.embedder.embed(getattr(texts, name)) for name in FIELD_NAMES))

    return IndexedPoint(
      id = self.point_id(article),
      vectors = {
        name: vector for name, vector in zip(FIELD_NAMES, vectors)
        if vector is not None
      },
      payload = {
        "title": texts.title,
        "summary": texts.summary,
        "tags": list(article.tags),
        "link": article.original_link,
        "published_time": article.published_time
      }
    )

  async def index_articles(self, articles: Iterable[Union[Article, Dict[str, Any]]]) -> IndexReport:
    """Index articles in one batch upsert"""
    await self.schema.ensure_collection()

    articles = [a if isinstance(a, Article) else Article.from_dict(a) for a in articles]
    report = IndexReport()
    points: List[IndexedPoint] = []

    for article in tqdm(articles, desc="Indexing articles", disable=not self.show_progress):
      try:
        points.append(await self.build_point(article))
      except (EmbeddingError, OperationTimeoutError) as e:
        if self.on_error == "abort":
          logger.error(f"✗ Indexing aborted on {article.original_link}: {e}")
          raise
        logger.warning(f"⚠ Skipping {article.original_link}: {e}")
        report.failed.append(article.original_link)

    if not points:
      logger.info("ℹ No articles to index")
      return report

    await self.store.upsert(self.schema.collection_name, points, wait=True)
    report.indexed = len(points)

    logger.info(f"✓ Indexed {report.indexed} articles")
    if report.failed:
      logger.warning(f"⚠ {len(report.failed)} articles failed")
    return report
