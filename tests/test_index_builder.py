import math
import time
import numpy as np
import pytest
from article_search.engine import ArticleVectorSearch
from article_search.exceptions import EmbeddingError
from article_search.models.article import Article
from conftest import DIMENSION, HashEmbeddingProvider


async def stored_points(qdrant, collection="test_articles"):
  records, _ = await qdrant.scroll(collection, limit=100, with_payload=True, with_vectors=True)
  return records


@pytest.mark.asyncio
async def test_point_has_three_unit_vectors(engine, irs_article):
  point = await engine.indexer.build_point(Article.from_dict(irs_article))

  assert set(point.vectors) == {"title", "summary", "tags"}
  for vector in point.vectors.values():
    assert len(vector) == DIMENSION
    assert math.isclose(float(np.linalg.norm(vector)), 1.0, rel_tol=1e-6)


@pytest.mark.asyncio
async def test_payload(engine, irs_article):
  point = await engine.indexer.build_point(Article.from_dict(irs_article))

  assert point.payload == {
    "title": "IRS Direct File Program Eliminated, Taxpayers Seek Alternatives for 2026",
    "summary": "The IRS Direct File program allowed free filing for millions. "
               "The program was terminated after political criticism.",
    "tags": ["Tax", "IRS", "Fiscal Policy"],
    "link": irs_article["original_link"],
    "published_time": "2026-01-06T17:41:00.000Z"
  }


@pytest.mark.asyncio
async def test_fields_embedded_concurrently(config, qdrant, irs_article):
  search = ArticleVectorSearch(config, embedding_provider=HashEmbeddingProvider(delay=0.3), client=qdrant)
  await search.embedder.initialize()

  started = time.perf_counter()
  point = await search.indexer.build_point(Article.from_dict(irs_article))
  elapsed = time.perf_counter() - started

  assert set(point.vectors) == {"title", "summary", "tags"}
  # Three sequential embeddings would take at least 0.9s
  assert elapsed < 0.75


@pytest.mark.asyncio
async def test_empty_tags_have_no_vector_but_keep_payload(engine, provider, untagged_article):
  point = await engine.indexer.build_point(Article.from_dict(untagged_article))

  assert "tags" not in point.vectors
  assert set(point.vectors) == {"title", "summary"}
  assert point.payload["tags"] == []
  assert point.payload["link"] == untagged_article["original_link"]
  assert "" not in provider.embedded


@pytest.mark.asyncio
async def test_index_articles_upserts_all(engine, qdrant, irs_article, tech_article):
  report = await engine.index_articles({"articles": [irs_article, tech_article]})

  assert report.indexed == 2
  assert report.failed == []

  links = {r.payload["link"] for r in await stored_points(qdrant)}
  assert links == {irs_article["original_link"], tech_article["original_link"]}


@pytest.mark.asyncio
async def test_reindexing_creates_new_points(engine, qdrant, irs_article):
  await engine.index_articles([irs_article])
  await engine.index_articles([irs_article])

  records = await stored_points(qdrant)
  assert len(records) == 2
  assert len({str(r.id) for r in records}) == 2


@pytest.mark.asyncio
async def test_dedup_by_link_overwrites(config, provider, qdrant, irs_article):
  config['indexing']['deduplicate_by_link'] = True
  search = ArticleVectorSearch(config, embedding_provider=provider, client=qdrant)

  await search.index_articles([irs_article])
  await search.index_articles([irs_article])

  assert len(await stored_points(qdrant)) == 1


@pytest.mark.asyncio
async def test_embedding_failure_aborts_batch(config, qdrant, irs_article, tech_article):
  provider = HashEmbeddingProvider(fail_on="Chipmakers")
  search = ArticleVectorSearch(config, embedding_provider=provider, client=qdrant)

  with pytest.raises(EmbeddingError):
    await search.index_articles([irs_article, tech_article])

  assert await stored_points(qdrant) == []


@pytest.mark.asyncio
async def test_skip_policy_isolates_failures(config, qdrant, irs_article, tech_article):
  config['indexing']['on_error'] = 'skip'
  provider = HashEmbeddingProvider(fail_on="Chipmakers")
  search = ArticleVectorSearch(config, embedding_provider=provider, client=qdrant)

  report = await search.index_articles([irs_article, tech_article])

  assert report.indexed == 1
  assert report.failed == [tech_article["original_link"]]
  records = await stored_points(qdrant)
  assert [r.payload["link"] for r in records] == [irs_article["original_link"]]


@pytest.mark.asyncio
async def test_empty_input_writes_nothing(engine, qdrant, monkeypatch):
  calls = []

  async def spy(*args, **kwargs):
    calls.append(args)

  monkeypatch.setattr(engine.store, "upsert", spy)

  report = await engine.index_articles({"articles": []})

  assert report.indexed == 0
  assert calls == []
  assert "test_articles" in await engine.store.list_collections()


@pytest.mark.asyncio
async def test_single_batch_upsert_keeps_input_order(engine, monkeypatch, irs_article, tech_article, untagged_article):
  batches = []

  async def spy(name, points, wait=True):
    batches.append((name, [p.payload["link"] for p in points], wait))

  monkeypatch.setattr(engine.store, "upsert", spy)

  await engine.index_articles([tech_article, untagged_article, irs_article])

  assert batches == [(
    "test_articles",
    [tech_article["original_link"], untagged_article["original_link"], irs_article["original_link"]],
    True
  )]


@pytest.mark.asyncio
async def test_invalid_error_policy(config, provider, qdrant):
  config['indexing']['on_error'] = 'retry'
  with pytest.raises(ValueError):
    ArticleVectorSearch(config, embedding_provider=provider, client=qdrant)
